from datetime import datetime, timedelta

import pytest

from marketplace.core.errors import NotFound
from marketplace.crud import vendor as crud_vendor
from marketplace.db.session import SessionLocal
from marketplace.models.vendor import Vendor, VendorFollower

from conftest import API


def _followers(db, vendor_id):
    db.expire_all()
    return db.query(Vendor).filter(Vendor.id == vendor_id).one().followers


def test_follow_then_unfollow_restores_counter(db, make_user, make_vendor):
    user = make_user()
    vendor = make_vendor(followers=2340)

    assert crud_vendor.toggle_follow(db, user_id=user.id, vendor_id=vendor.id) is True
    assert _followers(db, vendor.id) == 2341
    assert crud_vendor.toggle_follow(db, user_id=user.id, vendor_id=vendor.id) is False
    assert _followers(db, vendor.id) == 2340
    assert db.query(VendorFollower).count() == 0


def test_counter_never_goes_negative(db, make_user, make_vendor):
    user = make_user()
    vendor = make_vendor(followers=0)
    db.add(VendorFollower(user_id=user.id, vendor_id=vendor.id))
    db.commit()

    assert crud_vendor.toggle_follow(db, user_id=user.id, vendor_id=vendor.id) is False
    assert _followers(db, vendor.id) == 0


def test_follow_race_is_counted_once(db, make_user, make_vendor, monkeypatch):
    user = make_user()
    vendor = make_vendor(followers=0)
    user_id, vendor_id = user.id, vendor.id

    def followed_concurrently(session, user_id, vendor_id):
        other = SessionLocal()
        try:
            other.add(VendorFollower(user_id=user_id, vendor_id=vendor_id))
            other.query(Vendor).filter(Vendor.id == vendor_id).update(
                {Vendor.followers: Vendor.followers + 1},
                synchronize_session=False
            )
            other.commit()
        finally:
            other.close()
        return False

    monkeypatch.setattr(crud_vendor, "_is_following", followed_concurrently)

    assert crud_vendor.toggle_follow(db, user_id=user_id, vendor_id=vendor_id) is True
    assert _followers(db, vendor_id) == 1
    assert db.query(VendorFollower).count() == 1


def test_follow_unknown_vendor(db, make_user):
    with pytest.raises(NotFound):
        crud_vendor.toggle_follow(db, user_id=make_user().id, vendor_id=77)


def test_followed_vendors_with_stories(db, make_user, make_vendor, make_story):
    user = make_user()
    fresh = make_vendor(name="Fashion Forward")
    stale = make_vendor(name="Green Living")
    make_vendor(name="Not Followed")
    now = datetime.utcnow()
    story = make_story(fresh, content="Summer sale")
    make_story(stale, created_at=now - timedelta(hours=30), expires_at=now - timedelta(hours=6))
    crud_vendor.toggle_follow(db, user_id=user.id, vendor_id=fresh.id)
    crud_vendor.toggle_follow(db, user_id=user.id, vendor_id=stale.id)

    followed = {v["id"]: v for v in crud_vendor.list_followed_with_stories(db, user_id=user.id)}

    assert set(followed) == {fresh.id, stale.id}
    assert followed[fresh.id]["has_new_story"] is True
    assert [s.id for s in followed[fresh.id]["stories"]] == [story.id]
    assert followed[stale.id]["has_new_story"] is False
    assert followed[stale.id]["stories"] == []


def test_followed_products(db, make_user, make_vendor, make_product):
    user = make_user()
    followed = make_vendor(name="TechCorp")
    other = make_vendor(name="Other")
    keyboard = make_product(vendor=followed, title="Keyboard")
    make_product(vendor=followed, title="Retired", is_active=False)
    make_product(vendor=other, title="Scarf")
    crud_vendor.toggle_follow(db, user_id=user.id, vendor_id=followed.id)

    products = crud_vendor.list_followed_products(db, user_id=user.id)

    assert [p.id for p in products] == [keyboard.id]


def test_vendor_list_is_public_and_sorted(client, make_vendor):
    make_vendor(name="Fashion Forward", rating=4.6)
    make_vendor(name="Green Living", rating=4.9)

    response = client.get(f"{API}/vendors")

    assert response.status_code == 200
    assert [v["name"] for v in response.json()] == ["Green Living", "Fashion Forward"]
    assert "totalSales" in response.json()[0]


def test_follow_endpoint(client, make_user, make_vendor, auth_headers):
    user = make_user()
    vendor = make_vendor(followers=10)
    headers = auth_headers(user)

    followed = client.post(f"{API}/vendors/{vendor.id}/follow", headers=headers)
    assert followed.status_code == 200
    assert followed.json()["following"] is True
    assert client.get(f"{API}/vendors/{vendor.id}").json()["followers"] == 11

    unfollowed = client.post(f"{API}/vendors/{vendor.id}/follow", headers=headers)
    assert unfollowed.json()["following"] is False
    assert client.get(f"{API}/vendors/{vendor.id}").json()["followers"] == 10


def test_follow_requires_token(client, make_vendor):
    vendor = make_vendor()
    response = client.post(f"{API}/vendors/{vendor.id}/follow")
    assert response.status_code == 401


def test_following_endpoint(client, make_user, make_vendor, make_story, auth_headers):
    user = make_user()
    vendor = make_vendor(name="Fashion Forward")
    make_story(vendor, content="New drop")
    headers = auth_headers(user)
    client.post(f"{API}/vendors/{vendor.id}/follow", headers=headers)

    body = client.get(f"{API}/vendors/following", headers=headers).json()

    assert len(body) == 1
    assert body[0]["hasNewStory"] is True
    assert body[0]["stories"][0]["content"] == "New drop"


def test_unknown_vendor(client):
    response = client.get(f"{API}/vendors/404")
    assert response.status_code == 404
    assert response.json() == {"error": "Vendor not found"}
