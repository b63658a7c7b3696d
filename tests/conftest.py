"""
Pytest configuration for all tests.
Builds the application on TestingConfig with a fresh in-memory schema per test.
"""

import pytest

from claimflow import create_app, db
from claimflow.models import User, UserRole
from claimflow.services import claim_service

LEVELS = ("l1", "l2", "l3", "l4")


@pytest.fixture
def app():
    """Create Flask test app with an empty schema."""
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def users(app):
    """Two employees and one admin per approval level."""
    roster = {
        "employee": User(name="Rahul Sharma", email="rahul.sharma@company.com", role=UserRole.USER),
        "colleague": User(name="Anita Desai", email="anita.desai@company.com", role=UserRole.USER),
        "l1": User(name="Priya Patel", email="priya.patel@company.com", role=UserRole.L1_ADMIN),
        "l2": User(name="Amit Kumar", email="amit.kumar@company.com", role=UserRole.L2_ADMIN),
        "l3": User(name="Sneha Reddy", email="sneha.reddy@company.com", role=UserRole.L3_ADMIN),
        "l4": User(name="Vikram Singh", email="vikram.singh@company.com", role=UserRole.L4_ADMIN),
    }
    db.session.add_all(roster.values())
    db.session.commit()
    return roster


@pytest.fixture
def submit(users):
    """Submit a claim through the service and return its id."""
    def _submit(amount=1000, claim_date="2026-01-10", title="Taxi to client site", owner="employee"):
        user = users[owner]
        return claim_service.create_claim(user.id, user.name, title, amount, "Business travel", claim_date)

    return _submit


@pytest.fixture
def advance(users):
    """Approve a claim through the first ``levels`` approval levels."""
    def _advance(claim_id, levels):
        for key in LEVELS[:levels]:
            claim_service.approve_claim(claim_id, "ok", users[key])

    return _advance


def auth(user):
    """Acting-identity header for the test client."""
    return {"X-User-Id": str(user.id)}
