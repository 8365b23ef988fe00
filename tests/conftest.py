import io
import os
import tempfile
from decimal import Decimal

# settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="furniture-uploads-"))
os.environ.setdefault("SEED_STATIC_DATA", "false")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.datastructures import Headers

from furniture_app.db import build_engine, get_db, init_db
from furniture_app.deps import get_file_storage
from furniture_app.main import app
from furniture_app.models.ad import Ad, Condition
from furniture_app.models.static_data import Category, City
from furniture_app.models.user import Role, User
from furniture_app.services.files import FileStorage
from furniture_app.utils.security import create_jwt, hash_password

PASSWORD = "Secret#123"


@pytest.fixture
def engine():
    eng = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    return FileStorage(tmp_path / "uploads", "/uploads")


@pytest.fixture
def static_data(db):
    chairs, tables = Category(name="Chairs"), Category(name="Tables")
    athens, patras = City(name="Athens"), City(name="Patras")
    db.add_all([chairs, tables, athens, patras])
    db.commit()
    return {"Chairs": chairs, "Tables": tables, "Athens": athens, "Patras": patras}


def make_user(db, username, role=Role.USER, is_active=True, **extra):
    u = User(
        username=username,
        email=extra.pop("email", f"{username}@example.com"),
        password=hash_password(PASSWORD),
        first_name=extra.pop("first_name", username.title()),
        last_name=extra.pop("last_name", "Tester"),
        phone=extra.pop("phone", "6900000000"),
        role=role,
        is_active=is_active,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def user(db):
    return make_user(db, "alice")


@pytest.fixture
def other_user(db):
    return make_user(db, "bob")


@pytest.fixture
def admin(db):
    return make_user(db, "root", role=Role.ADMIN)


def make_upload(filename="chair.png", content_type="image/png", data=b"\x89PNG fake image"):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        size=len(data),
        headers=Headers({"content-type": content_type}),
    )


def auth_headers(u):
    return {"Authorization": f"Bearer {create_jwt({'sub': u.username, 'role': u.role.value})}"}


@pytest.fixture
def client(db, storage):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_file_storage] = lambda: storage
    # no context manager: the lifespan would touch the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_ad(db, owner, category, city, title="Oak chair", price="50.00",
            condition=None, is_available=True, description="Solid oak"):
    ad = Ad(
        title=title,
        description=description,
        price=Decimal(price),
        condition=condition or Condition.GOOD,
        is_available=is_available,
        category=category,
        city=city,
        user=owner,
    )
    db.add(ad)
    db.commit()
    db.refresh(ad)
    return ad
