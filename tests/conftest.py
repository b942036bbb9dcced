"""Test configuration and fixtures for orgchart tests.

Minimal fixtures - only the database engine, a session and a company factory.
Tests should create their own test data directly using model constructors.
"""

import os

import pytest
import sqlalchemy
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from orgchart.database import create_engine
from orgchart.models import Base, Company, Employee


@pytest.fixture(scope="session")
def setup_test_database():
    """Setup test database once for the entire test session.

    Uses TEST_DATABASE_URL when set, otherwise a shared in-memory SQLite database.
    """
    url = os.getenv("TEST_DATABASE_URL")
    if url:
        engine = create_engine(url)
    else:
        engine = sqlalchemy.create_engine(
            "sqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(setup_test_database):
    """Provide a database session for tests with transaction rollback.

    Each test runs in a transaction that is rolled back after the test completes.
    """
    engine = setup_test_database

    connection = engine.connect()
    connection.begin()

    session = Session(bind=connection)

    yield session

    # Closing the connection rolls back any uncommitted transaction
    session.close()
    connection.close()


@pytest.fixture
def make_company(db_session):
    """Factory creating a company from (employee_id, boss_id) pairs.

    Employees mentioned in the pairs that don't exist yet are created in the
    new company; ids that already exist (e.g. in another company) are reused,
    which allows building cross-company reporting lines. Bosses are assigned
    after all rows exist so cycles can be stored.
    """

    def _make_company(name, reporting_lines, extra_ids=()):
        company = Company(name=name)
        db_session.add(company)
        db_session.flush()

        ids = set(extra_ids)
        for employee_id, boss_id in reporting_lines:
            ids.add(employee_id)
            if boss_id is not None:
                ids.add(boss_id)

        for employee_id in sorted(ids):
            if db_session.get(Employee, employee_id) is None:
                db_session.add(
                    Employee(
                        id=employee_id,
                        company_id=company.id,
                        name=f"Employee {employee_id}",
                    )
                )
        db_session.flush()

        for employee_id, boss_id in reporting_lines:
            db_session.get(Employee, employee_id).boss_id = boss_id
        db_session.flush()

        return company

    return _make_company
