from backinstock.services.engine import Engine, build_engine
from backinstock.services.restock_handler import RestockEventHandler
from backinstock.services.subscription_intake import SubscriptionIntake

__all__ = ["Engine", "build_engine", "RestockEventHandler", "SubscriptionIntake"]
