"""Flask application class carrying the service container."""

from flask import Flask

from app.services.container import ServiceContainer


class App(Flask):
    """Flask application with a dependency injection container attached."""

    container: ServiceContainer
