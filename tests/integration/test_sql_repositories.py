"""
Integration tests - SQL repositories against in-memory SQLite.
"""

from datetime import date

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.exc import SQLAlchemyError

from app.domain.exceptions import AlreadyDistributedError, DistributionPersistError
from app.domain.services import ProfitDistributionService
from app.domain.value_objects import VehicleStatus
from app.infrastructure.database.models import ProfitDistribution as DistributionModel
from app.infrastructure.database.models import Vehicle as VehicleModel
from app.infrastructure.repositories import (
    SqlInvestmentRepository,
    SqlProfitDistributionRepository,
    SqlVehicleRepository,
    resolve_vehicle_status,
    vehicle_status_filter,
)


def build_service(session) -> ProfitDistributionService:
    return ProfitDistributionService(
        vehicle_repo=SqlVehicleRepository(session),
        investment_repo=SqlInvestmentRepository(session),
        distribution_repo=SqlProfitDistributionRepository(session),
    )


def count_distributions(database, vehicle_id: int) -> int:
    session = database.session()
    try:
        return session.execute(
            select(func.count()).select_from(DistributionModel).where(DistributionModel.vehicle_id == vehicle_id)
        ).scalar_one()
    finally:
        session.close()


class TestResolveVehicleStatus:
    """Legacy `sold` flag and `vehicle_status` collapse into one status."""

    @pytest.mark.parametrize(
        "sold_flag, vehicle_status, expected",
        [
            ("Yes", None, VehicleStatus.SOLD),
            ("Yes", "Landed", VehicleStatus.SOLD),
            ("yes", "Purchased", VehicleStatus.SOLD),
            (None, "Sold", VehicleStatus.SOLD),
            ("No", "Sold", VehicleStatus.SOLD),
            ("No", "Reserved", VehicleStatus.RESERVED),
            (None, "shipped", VehicleStatus.SHIPPED),
            (None, None, VehicleStatus.PURCHASED),
            ("No", "Scrapped", VehicleStatus.PURCHASED),
        ],
    )
    def test_resolution(self, sold_flag, vehicle_status, expected):
        assert resolve_vehicle_status(sold_flag, vehicle_status) == expected


class TestVehicleStatusFilter:
    """The SQL filter picks the same rows the Python resolution does."""

    STORED = [
        ("Yes", None),
        ("yes", "Landed"),
        ("No", "Sold"),
        (None, "shipped"),
        ("No", "Reserved"),
        (None, None),
        ("No", "Scrapped"),
        (None, "Purchased"),
    ]

    @pytest.mark.parametrize("status", list(VehicleStatus))
    def test_matches_resolution(self, database, status):
        session = database.session()
        for idx, (sold_flag, stored_status) in enumerate(self.STORED):
            session.add(VehicleModel(chassis_no=f"NHP10-{idx}", sold=sold_flag, vehicle_status=stored_status))
        session.commit()

        rows = session.execute(select(VehicleModel)).scalars().all()
        expected = {r.id for r in rows if resolve_vehicle_status(r.sold, r.vehicle_status) == status}
        filtered = session.execute(
            select(VehicleModel.id).where(vehicle_status_filter(status))
        ).scalars().all()
        session.close()

        assert set(filtered) == expected


class TestSqlVehicleRepository:

    def test_legacy_flag_only_vehicle_is_sold(self, database):
        session = database.session()
        row = VehicleModel(chassis_no="AZE0-100200", profit=500.0, sold="Yes", vehicle_status=None)
        session.add(row)
        session.commit()

        vehicle = SqlVehicleRepository(session).get_by_id(row.id)
        assert vehicle.is_sold()
        session.close()

    def test_save_writes_both_columns(self, database):
        session = database.session()
        row = VehicleModel(chassis_no="AZE0-100200", total_cost=4000.0, vehicle_status="Landed", sold="No")
        session.add(row)
        session.commit()

        repo = SqlVehicleRepository(session)
        saved = repo.save(repo.get_by_id(row.id).mark_sold(4600.0))

        assert saved.profit == pytest.approx(600.0)
        session.refresh(row)
        assert row.vehicle_status == "Sold"
        assert row.sold == "Yes"
        session.close()

    def test_missing_vehicle(self, database):
        session = database.session()
        assert SqlVehicleRepository(session).get_by_id(404) is None
        session.close()


class TestSqlDistribution:

    def test_distribution_persists_rows(self, database, ledger):
        session = database.session()
        result = build_service(session).distribute(ledger.vehicle_id, distribution_date=date(2025, 6, 1))
        session.close()

        assert result.distributions_count == 2
        assert result.total_distributed == pytest.approx(1000.0)
        assert all(d.id is not None for d in result.distributions)

        check = database.session()
        rows = check.execute(
            select(DistributionModel).where(DistributionModel.vehicle_id == ledger.vehicle_id)
        ).scalars().all()
        by_investor = {r.investor_id: r for r in rows}
        assert by_investor[ledger.investor_a_id].amount == pytest.approx(300.0)
        assert by_investor[ledger.investor_a_id].percentage == pytest.approx(30.0)
        assert by_investor[ledger.investor_b_id].amount == pytest.approx(700.0)
        assert by_investor[ledger.investor_b_id].percentage == pytest.approx(70.0)
        check.close()

    def test_failure_on_second_insert_rolls_back(self, database, ledger):
        inserted = []

        def fail_second_insert(mapper, connection, target):
            inserted.append(target)
            if len(inserted) == 2:
                raise SQLAlchemyError("simulated write failure")

        event.listen(DistributionModel, "after_insert", fail_second_insert)
        try:
            session = database.session()
            with pytest.raises(DistributionPersistError):
                build_service(session).distribute(ledger.vehicle_id)
            session.close()
        finally:
            event.remove(DistributionModel, "after_insert", fail_second_insert)

        assert len(inserted) == 2
        assert count_distributions(database, ledger.vehicle_id) == 0

    def test_retry_after_failure_succeeds(self, database, ledger):
        def always_fail(mapper, connection, target):
            raise SQLAlchemyError("simulated write failure")

        event.listen(DistributionModel, "after_insert", always_fail)
        try:
            session = database.session()
            with pytest.raises(DistributionPersistError):
                build_service(session).distribute(ledger.vehicle_id)
            session.close()
        finally:
            event.remove(DistributionModel, "after_insert", always_fail)

        session = database.session()
        assert build_service(session).distribute(ledger.vehicle_id).distributions_count == 2
        session.close()

    def test_second_distribution_rejected(self, database, ledger):
        session = database.session()
        service = build_service(session)
        service.distribute(ledger.vehicle_id)

        with pytest.raises(AlreadyDistributedError):
            service.distribute(ledger.vehicle_id)
        session.close()

        assert count_distributions(database, ledger.vehicle_id) == 2

    def test_interleaved_requests_for_one_vehicle(self, file_database, file_ledger):
        """Second request commits between the first request's guard and its insert."""
        first_session = file_database.session()
        second_session = file_database.session()
        first = build_service(first_session)
        second = build_service(second_session)

        second_results = []
        guard = first.distribution_repo.count_by_vehicle

        def count_then_let_other_request_finish(vehicle_id):
            count = guard(vehicle_id)
            if not second_results:
                second_results.append(second.distribute(vehicle_id))
            return count

        first.distribution_repo.count_by_vehicle = count_then_let_other_request_finish
        try:
            with pytest.raises(AlreadyDistributedError):
                first.distribute(file_ledger.vehicle_id)
        finally:
            first_session.close()
            second_session.close()

        assert second_results[0].distributions_count == 2
        assert count_distributions(file_database, file_ledger.vehicle_id) == 2

    def test_delete_then_recalculate(self, database, ledger):
        session = database.session()
        service = build_service(session)
        service.distribute(ledger.vehicle_id)

        assert service.reset(ledger.vehicle_id) == 2
        assert count_distributions(database, ledger.vehicle_id) == 0

        service.distribute(ledger.vehicle_id)
        session.close()
        assert count_distributions(database, ledger.vehicle_id) == 2
