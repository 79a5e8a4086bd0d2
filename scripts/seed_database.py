#!/usr/bin/env python3
"""
Database Seeding Script - Vehicle import ledger
Seed sample investors, vehicles and investments for local testing.
"""

from datetime import date

INVESTORS = [
    ("Nimal Perera", "+94 77 123 4567", "nimal@example.lk"),
    ("Kasun Silva", "+94 71 555 0101", "kasun@example.lk"),
    ("Dilani Fernando", "+94 76 222 8899", None),
]

VEHICLES = [
    # chassis_no, vehicle_type, year, total_cost, status, sale_price
    ("NZE141-9012345", "Toyota Axio", 2018, 6_250_000.0, "Sold", 7_100_000.0),
    ("GP5-3101122", "Honda Fit Hybrid", 2017, 4_900_000.0, "Landed", None),
    ("ZVW30-5566778", "Toyota Prius", 2016, 5_400_000.0, "Shipped", None),
]

INVESTMENTS = [
    # vehicle index, investor index, amount
    (0, 0, 3_000_000.0),
    (0, 1, 2_250_000.0),
    (0, 2, 1_000_000.0),
    (1, 0, 2_900_000.0),
    (1, 2, 2_000_000.0),
    (2, 1, 5_400_000.0),
]


def main():
    """Main function."""
    print("=" * 60)
    print("Database Seeding - Vehicle import ledger")
    print("=" * 60)

    from app.core import config
    from app.core.security import hash_password
    from app.infrastructure.database import Database, seed_default_admin
    from app.infrastructure.database.models import Investor, User, Vehicle, VehicleInvestment
    from app.infrastructure.repositories import legacy_sold_flag
    from app.domain.value_objects import VehicleStatus

    database = Database()
    database.open()
    database.init_db()
    seed_default_admin(database, config.DEFAULT_ADMIN_USERNAME, config.DEFAULT_ADMIN_PASSWORD)

    db = database.session()

    try:
        if not db.query(User).filter(User.username == "readonly").first():
            pw_hash, salt = hash_password("readonly123")
            db.add(User(username="readonly", password_hash=pw_hash, password_salt=salt.hex(), role="readonly"))
            db.commit()
            print("✓ Created readonly user")

        investors = []
        for name, contact, email in INVESTORS:
            investor = db.query(Investor).filter(Investor.name == name).first()
            if not investor:
                investor = Investor(name=name, contact_info=contact, email=email)
                db.add(investor)
            investors.append(investor)
        db.commit()
        print(f"✓ Seeded {len(investors)} investors")

        vehicles = []
        for chassis_no, vehicle_type, year, total_cost, status, sale_price in VEHICLES:
            vehicle = db.query(Vehicle).filter(Vehicle.chassis_no == chassis_no).first()
            if not vehicle:
                vehicle = Vehicle(
                    chassis_no=chassis_no,
                    vehicle_type=vehicle_type,
                    year=year,
                    total_cost=total_cost,
                    sale_price=sale_price,
                    profit=sale_price - total_cost if sale_price else None,
                    vehicle_status=status,
                    sold=legacy_sold_flag(VehicleStatus(status)),
                )
                db.add(vehicle)
            vehicles.append(vehicle)
        db.commit()
        print(f"✓ Seeded {len(vehicles)} vehicles")

        created = 0
        for vehicle_idx, investor_idx, amount in INVESTMENTS:
            vehicle = vehicles[vehicle_idx]
            investor = investors[investor_idx]
            exists = db.query(VehicleInvestment).filter(
                VehicleInvestment.vehicle_id == vehicle.id,
                VehicleInvestment.investor_id == investor.id,
            ).first()
            if not exists:
                db.add(VehicleInvestment(
                    vehicle_id=vehicle.id,
                    investor_id=investor.id,
                    amount=amount,
                    investment_date=date.today(),
                ))
                created += 1
        db.commit()
        print(f"✓ Seeded {created} investments")

        print("\n" + "=" * 60)
        print("Seeding completed successfully!")
        print("=" * 60)

    except Exception as e:
        print(f"\n❌ Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        database.close()


if __name__ == "__main__":
    main()
