"""
Database utilities, migrations, and seeding for the resort schema.

Runtime reads live in the advisor service (SqlAdvisorStore). This package covers:
- Alembic migrations config
- Deterministic seed generator for rooms, reservations, services and vouchers
"""
