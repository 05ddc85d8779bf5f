"""Replace all projects with a small sample set."""

from datetime import date

from sqlalchemy.orm import Session
from app.db.session import SessionLocal, init_db
from app.models import Project, ProjectStatus

SAMPLE_PROJECTS = [
    ("E-Commerce Platform Redesign", "PT Tokopedia Digital", ProjectStatus.active, date(2026, 1, 15), date(2026, 6, 30)),
    ("Mobile Banking App", "Bank Mandiri", ProjectStatus.active, date(2026, 1, 1), date(2026, 8, 31)),
    ("Inventory Management System", "PT Gudang Garam", ProjectStatus.active, date(2026, 2, 10), date(2026, 4, 15)),
    ("Company Website Revamp", "CV Kreatif Studio", ProjectStatus.completed, date(2025, 10, 1), date(2025, 12, 31)),
    ("CRM Integration Project", "PT Astra Internasional", ProjectStatus.on_hold, date(2026, 2, 1), date(2026, 5, 30)),
    ("Data Analytics Dashboard", "PT Telkom Indonesia", ProjectStatus.active, date(2026, 1, 20), date(2026, 4, 30)),
    ("HR Management System", "PT Pertamina", ProjectStatus.active, None, date(2026, 7, 1)),
    ("Legacy System Migration", "PT Indofood", ProjectStatus.on_hold, date(2025, 11, 1), date(2026, 3, 31)),
    ("IoT Monitoring Platform", "PT PLN", ProjectStatus.active, None, date(2026, 9, 30)),
    ("Supply Chain Optimization", "PT Unilever Indonesia", ProjectStatus.completed, date(2025, 8, 1), date(2025, 12, 15)),
]


def run():
    init_db()
    db: Session = SessionLocal()
    try:
        db.query(Project).delete()
        db.add_all(
            [
                Project(
                    name=name,
                    client_name=client_name,
                    status=status,
                    start_date=start_date,
                    end_date=end_date,
                )
                for name, client_name, status, start_date, end_date in SAMPLE_PROJECTS
            ]
        )
        db.commit()
        print(f"Seeded {len(SAMPLE_PROJECTS)} sample projects")
    finally:
        db.close()


if __name__ == "__main__":
    run()
