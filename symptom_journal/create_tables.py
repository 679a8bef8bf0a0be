# symptom_journal/create_tables.py
from symptom_journal.config import Settings
from symptom_journal.db.session import build_engine
from symptom_journal.models import init_db


def main() -> None:
    settings = Settings.from_env()
    engine = build_engine(settings.database_url, settings.database_key, echo=settings.sql_echo)
    print("Creating tables...")
    init_db(engine)
    print("Tables created.")


if __name__ == "__main__":
    main()
