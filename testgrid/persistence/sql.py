"""SQLAlchemy-backed test plan and test scenario stores."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    func,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    relationship,
    sessionmaker,
)

from ..config.models import TestConfig
from ..lifecycle import Status
from ..plan.models import TestCase, TestPlan, TestScenario
from .base import TestPlanStore, TestScenarioStore
from .errors import PersistenceError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for TestGrid ORM models."""


class TestPlanRecord(Base):
    __tablename__ = "test_plan"
    __test__ = False

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deployment_pattern: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    infra_parameters: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    test_run_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    infra_repo_dir: Mapped[str] = mapped_column(Text, nullable=False)
    deployment_repo_dir: Mapped[str] = mapped_column(Text, nullable=False)
    scenario_repo_dir: Mapped[str] = mapped_column(Text, nullable=False)
    test_config_json: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    scenarios = relationship(
        "TestScenarioRecord",
        back_populates="test_plan",
        cascade="all, delete-orphan",
        order_by="TestScenarioRecord.id",
    )


class TestScenarioRecord(Base):
    __tablename__ = "test_scenario"
    __test__ = False

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    test_plan_id: Mapped[int | None] = mapped_column(
        ForeignKey("test_plan.id"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    dir: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False)

    test_plan = relationship("TestPlanRecord", back_populates="scenarios")
    test_cases = relationship(
        "TestCaseRecord",
        back_populates="scenario",
        cascade="all, delete-orphan",
        order_by="TestCaseRecord.id",
    )


class TestCaseRecord(Base):
    __tablename__ = "test_case"
    __test__ = False

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    test_scenario_id: Mapped[int] = mapped_column(
        ForeignKey("test_scenario.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    failure_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    scenario = relationship("TestScenarioRecord", back_populates="test_cases")


def create_store_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine and make sure the schema exists.

    Args:
        database_url: SQLAlchemy URL, e.g. ``sqlite:////home/ci/.testgrid/testgrid.db``.
        echo: Log SQL (for development).

    Raises:
        PersistenceError: If the database cannot be reached or initialized.
    """
    try:
        if database_url.startswith("sqlite:///") and database_url != "sqlite:///:memory:":
            Path(database_url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(database_url, echo=echo)
        Base.metadata.create_all(engine)
    except (OSError, SQLAlchemyError) as e:
        raise PersistenceError(f"Cannot initialize database: {e}") from e
    return engine


def _scenario_from_record(record: TestScenarioRecord) -> TestScenario:
    return TestScenario(
        name=record.name,
        dir=record.dir,
        description=record.description,
        status=Status(record.status),
        test_cases=[
            TestCase(
                name=tc.name,
                success=tc.success,
                failure_message=tc.failure_message,
                scenario_name=record.name,
            )
            for tc in record.test_cases
        ],
        id=record.id,
        test_plan_id=record.test_plan_id,
    )


class SqlTestPlanStore(TestPlanStore):
    """Persist test plans through a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_engine(cls, engine: Engine) -> "SqlTestPlanStore":
        return cls(sessionmaker(bind=engine, expire_on_commit=False))

    def persist_test_plan(self, test_plan: TestPlan) -> TestPlan:
        try:
            with self._session_factory.begin() as session:
                record = session.get(TestPlanRecord, test_plan.id) if test_plan.id else None
                if record is None:
                    record = TestPlanRecord(created_at=test_plan.created_at)
                    session.add(record)

                record.deployment_pattern = test_plan.deployment_pattern
                record.infra_parameters = test_plan.infra_parameters
                record.test_run_number = test_plan.test_run_number
                record.status = test_plan.status.value
                record.infra_repo_dir = test_plan.infra_repo_dir
                record.deployment_repo_dir = test_plan.deployment_repo_dir
                record.scenario_repo_dir = test_plan.scenario_repo_dir
                record.test_config_json = test_plan.test_config.model_dump_json(by_alias=True)

                by_id = {s.id: s for s in record.scenarios}
                scenario_records = []
                for scenario in test_plan.test_scenarios:
                    scenario_record = by_id.get(scenario.id) if scenario.id else None
                    if scenario_record is None and scenario.id:
                        # Scenario rows written before their plan had an id.
                        scenario_record = session.get(TestScenarioRecord, scenario.id)
                        if scenario_record is not None:
                            record.scenarios.append(scenario_record)
                    if scenario_record is None:
                        scenario_record = TestScenarioRecord(name=scenario.name)
                        record.scenarios.append(scenario_record)
                    scenario_record.dir = scenario.dir
                    scenario_record.description = scenario.description
                    scenario_record.status = scenario.status.value
                    scenario_records.append((scenario, scenario_record))

                session.flush()
                test_plan.id = record.id
                for scenario, scenario_record in scenario_records:
                    scenario.id = scenario_record.id
                    scenario.test_plan_id = record.id
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error while persisting {test_plan}: {e}") from e

        logger.debug("Persisted test plan %s with status %s", test_plan.id, test_plan.status.value)
        return test_plan

    def get_test_plan(self, test_plan_id: int) -> TestPlan | None:
        try:
            with self._session_factory() as session:
                record = session.get(TestPlanRecord, test_plan_id)
                if record is None:
                    return None
                return TestPlan(
                    test_config=TestConfig.model_validate_json(record.test_config_json),
                    deployment_pattern=record.deployment_pattern,
                    infra_parameters=record.infra_parameters,
                    infra_repo_dir=record.infra_repo_dir,
                    deployment_repo_dir=record.deployment_repo_dir,
                    scenario_repo_dir=record.scenario_repo_dir,
                    test_run_number=record.test_run_number,
                    status=Status(record.status),
                    test_scenarios=[_scenario_from_record(s) for s in record.scenarios],
                    created_at=record.created_at,
                    id=record.id,
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error while reading test plan {test_plan_id}: {e}") from e

    def latest_test_run_number(self, deployment_pattern: str | None, infra_parameters: str) -> int:
        stmt = select(func.max(TestPlanRecord.test_run_number)).where(
            TestPlanRecord.deployment_pattern == deployment_pattern,
            TestPlanRecord.infra_parameters == infra_parameters,
        )
        try:
            with self._session_factory() as session:
                return session.execute(stmt).scalar() or 0
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error while reading test run numbers: {e}") from e


class SqlTestScenarioStore(TestScenarioStore):
    """Persist test scenarios and their test cases."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_engine(cls, engine: Engine) -> "SqlTestScenarioStore":
        return cls(sessionmaker(bind=engine, expire_on_commit=False))

    def persist_test_scenario(self, test_scenario: TestScenario) -> TestScenario:
        try:
            with self._session_factory.begin() as session:
                record = (
                    session.get(TestScenarioRecord, test_scenario.id)
                    if test_scenario.id
                    else None
                )
                if record is None:
                    record = TestScenarioRecord(
                        name=test_scenario.name, test_plan_id=test_scenario.test_plan_id
                    )
                    session.add(record)

                record.dir = test_scenario.dir
                record.description = test_scenario.description
                record.status = test_scenario.status.value
                record.test_cases.clear()
                for test_case in test_scenario.test_cases:
                    record.test_cases.append(
                        TestCaseRecord(
                            name=test_case.name,
                            success=test_case.success,
                            failure_message=test_case.failure_message,
                        )
                    )
                session.flush()
                test_scenario.id = record.id
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Error while persisting test scenario {test_scenario.name}: {e}"
            ) from e
        return test_scenario
