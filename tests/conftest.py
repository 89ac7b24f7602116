import os
import tempfile

# Settings are read once at import, so the environment is fixed up first
_db_dir = tempfile.mkdtemp(prefix="marketplace-tests-")
os.environ["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{_db_dir}/test.db"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"
for key in ("REDIS_HOST", "FIRST_ADMIN_EMAIL", "FIRST_ADMIN_PASSWORD"):
    os.environ.pop(key, None)

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from marketplace.core.config import settings
from marketplace.core.security import create_access_token, get_password_hash
from marketplace.db.base import Base
from marketplace.db.session import SessionLocal, engine
from marketplace.main import app
from marketplace.models.category import Category
from marketplace.models.product import Product, ProductImage, ProductTag
from marketplace.models.story import VendorStory
from marketplace.models.user import User, UserRole
from marketplace.models.vendor import Vendor

API = settings.API_V1_STR


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role=UserRole.BUYER, is_active=True, name=None, password="secret123"):
        counter["n"] += 1
        user = User(
            name=name or f"User {counter['n']}",
            email=f"user{counter['n']}@example.com",
            hashed_password=get_password_hash(password),
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_vendor(db, make_user):
    def _make_vendor(name="TechCorp Electronics", rating=4.8, followers=0):
        user = make_user(role=UserRole.VENDOR, name=name)
        vendor = Vendor(
            user_id=user.id,
            name=name,
            description=f"{name}'s Store",
            rating=rating,
            followers=followers,
        )
        db.add(vendor)
        db.commit()
        db.refresh(vendor)
        return vendor

    return _make_vendor


@pytest.fixture
def make_category(db):
    def _make_category(name="Electronics"):
        category = Category(name=name, icon="Smartphone", color="bg-blue-100 text-blue-600")
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make_category


@pytest.fixture
def make_product(db, make_vendor):
    def _make_product(vendor=None, category=None, title="Wireless Earbuds Pro", price=149.99,
                      stock=45, is_active=True, is_trending=False, created_at=None, description=None):
        vendor = vendor or make_vendor()
        product = Product(
            vendor_id=vendor.id,
            category_id=category.id if category else None,
            title=title,
            description=description or f"{title} description",
            price=price,
            original_price=None,
            stock=stock,
            rating=4.7,
            review_count=234,
            is_trending=is_trending,
            is_active=is_active,
            created_at=created_at or datetime.utcnow(),
        )
        product.product_images = [
            ProductImage(image_url=f"https://img.example.com/{title}/2.jpg", sort_order=2),
            ProductImage(image_url=f"https://img.example.com/{title}/1.jpg", sort_order=1),
        ]
        product.product_tags = [ProductTag(tag="new")]
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make_product


@pytest.fixture
def make_story(db):
    def _make_story(vendor, content="New arrivals today", created_at=None, expires_at=None, is_active=True):
        created_at = created_at or datetime.utcnow()
        story = VendorStory(
            vendor_id=vendor.id,
            content=content,
            created_at=created_at,
            expires_at=expires_at or created_at + timedelta(hours=24),
            is_active=is_active,
        )
        db.add(story)
        db.commit()
        db.refresh(story)
        return story

    return _make_story


def _auth_headers(user):
    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return _auth_headers
