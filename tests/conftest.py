import pytest
import httpx

from animehub.core import settings as settings_module
from animehub.db.base import Base
from animehub.db.seed import seed_reference_data
from animehub.db.session import get_engine, get_sessionmaker, init_engine
from animehub.db.unit_of_work import UnitOfWork
from animehub.main import app
from animehub.services.characters import CharacterProfileService, ProfileFields


@pytest.fixture(autouse=True)
def _use_test_db(tmp_path, monkeypatch):
    db_path = tmp_path / "test.db"
    database_url = f"sqlite+pysqlite:///{db_path}"

    monkeypatch.setattr(settings_module.settings, "database_url", database_url)
    monkeypatch.setattr(settings_module.settings, "db_auto_create", True)
    monkeypatch.setattr(settings_module.settings, "media_root", str(tmp_path / "media"))

    init_engine(database_url)
    Base.metadata.create_all(bind=get_engine())
    with get_sessionmaker()() as db:
        seed_reference_data(db)

    yield


@pytest.fixture()
async def client():
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture()
def uow():
    SessionLocal = get_sessionmaker()
    with SessionLocal() as db:
        yield UnitOfWork(db)


@pytest.fixture()
def make_profile(uow):
    def _make(first_name: str = "Akira", last_name: str = "Kaze", **overrides) -> int:
        fields = ProfileFields(first_name=first_name, last_name=last_name, **overrides)
        return CharacterProfileService(uow).create_profile(fields).profile_id

    return _make
