"""FastAPI dependencies. The Engine is built once at startup and kept on app.state."""
from fastapi import Request

from backinstock.services.engine import Engine
from backinstock.services.restock_handler import RestockEventHandler
from backinstock.services.subscription_intake import SubscriptionIntake
from backinstock.services.subscription_store import SqlSubscriptionStore


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_store(request: Request) -> SqlSubscriptionStore:
    return get_engine(request).store


def get_intake(request: Request) -> SubscriptionIntake:
    return get_engine(request).intake


def get_restock_handler(request: Request) -> RestockEventHandler:
    return get_engine(request).restock_handler
