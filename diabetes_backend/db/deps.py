from fastapi import Request

from diabetes_backend.services.classifier import RiskClassifier
from diabetes_backend.services.store import DataStore


def get_store(request: Request) -> DataStore:
    """The store built by the entry point and attached in create_app."""
    return request.app.state.store


def get_classifier(request: Request) -> RiskClassifier:
    return request.app.state.classifier
