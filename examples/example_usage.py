"""Example: drive the service layer directly, without Flask.

Controllers are thin; the ledger rules live in the services, so a script can
call them with an explicit caller.
"""

import importlib

from config import get_settings_module

from src.hr_ledger.hr_ledger.container import build_container
from src.hr_ledger.hr_ledger.core.context import Caller
from src.hr_ledger.hr_ledger.core.enums import Role


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    admin = Caller(user_id=1, role=Role.ADMIN, company_id=1)

    for record in container.attendance_service.list_for_company(admin)[:5]:
        print(record.employee_id, record.work_date, record.check_in, record.check_out, record.total_hours)
    for record in container.payroll_service.list_for_company(admin)[:5]:
        print(record.employee_id, record.pay_period_start, record.net_pay, record.status.value)


if __name__ == "__main__":
    main()
