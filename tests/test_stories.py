from datetime import datetime, timedelta

import pytest

from marketplace.core.errors import Forbidden, ValidationError
from marketplace.crud import story as crud_story
from marketplace.models.story import VendorStory

from conftest import API


def test_create_sets_24h_expiry(db, make_vendor):
    vendor = make_vendor()

    story = crud_story.create(db, user_id=vendor.user_id, content="  Fresh stock  ", image_url=None)

    assert story.vendor_id == vendor.id
    assert story.content == "Fresh stock"
    assert story.views == 0
    assert story.expires_at > datetime.utcnow()
    assert timedelta(hours=23, minutes=59) < story.expires_at - story.created_at <= timedelta(hours=24, seconds=5)


def test_create_requires_content(db, make_vendor):
    vendor = make_vendor()
    with pytest.raises(ValidationError):
        crud_story.create(db, user_id=vendor.user_id, content="   ")


def test_create_requires_vendor_profile(db, make_user):
    buyer = make_user()
    with pytest.raises(Forbidden):
        crud_story.create(db, user_id=buyer.id, content="Hello")


def test_feed_excludes_expired_and_inactive(db, make_vendor, make_story):
    vendor = make_vendor()
    now = datetime.utcnow()
    live = make_story(vendor, content="live")
    make_story(vendor, content="expired", created_at=now - timedelta(hours=30), expires_at=now - timedelta(minutes=1))
    make_story(vendor, content="hidden", is_active=False)

    assert [s.id for s in crud_story.feed(db)] == [live.id]


def test_feed_is_newest_first_and_capped(db, make_vendor, make_story):
    vendor = make_vendor()
    now = datetime.utcnow()
    stories = [make_story(vendor, content=f"story {i}", created_at=now - timedelta(minutes=i)) for i in range(55)]

    feed = crud_story.feed(db)

    assert len(feed) == 50
    assert feed[0].id == stories[0].id
    assert feed[-1].id == stories[49].id


def test_increment_view(db, make_vendor, make_story):
    story = make_story(make_vendor())

    assert crud_story.increment_view(db, story.id) == 1
    assert crud_story.increment_view(db, story.id) == 1
    db.expire_all()
    assert db.query(VendorStory).filter(VendorStory.id == story.id).one().views == 2
    assert crud_story.increment_view(db, 123456) == 0


def test_create_story_endpoint(client, make_vendor, make_user, auth_headers):
    vendor = make_vendor()
    owner = vendor.user

    created = client.post(f"{API}/stories", json={"content": "Flash sale", "imageUrl": "https://img.example.com/s.jpg"},
                          headers=auth_headers(owner))
    assert created.status_code == 201
    assert created.json()["story"]["imageUrl"] == "https://img.example.com/s.jpg"

    missing = client.post(f"{API}/stories", json={}, headers=auth_headers(owner))
    assert missing.status_code == 400
    assert missing.json() == {"error": "Content is required"}

    buyer = make_user()
    forbidden = client.post(f"{API}/stories", json={"content": "Hi"}, headers=auth_headers(buyer))
    assert forbidden.status_code == 403
    assert forbidden.json() == {"error": "Only vendors can create stories"}


def test_feed_endpoint(client, make_vendor, make_story, make_user, auth_headers):
    vendor = make_vendor(name="Green Living")
    make_story(vendor, content="Plants restocked")

    assert client.get(f"{API}/stories/feed").status_code == 401

    body = client.get(f"{API}/stories/feed", headers=auth_headers(make_user())).json()
    assert len(body) == 1
    assert body[0]["content"] == "Plants restocked"
    assert body[0]["vendor"]["name"] == "Green Living"


def test_view_endpoint_is_anonymous_and_tolerates_unknown_ids(client, make_vendor, make_story):
    story = make_story(make_vendor())

    assert client.post(f"{API}/stories/{story.id}/view").status_code == 200
    assert client.post(f"{API}/stories/999999/view").json() == {"message": "View recorded"}


def test_view_out_of_range_id_is_a_no_op(db, client):
    assert crud_story.increment_view(db, 2 ** 64) == 0
    assert crud_story.increment_view(db, -1) == 0

    response = client.post(f"{API}/stories/{2 ** 64}/view")

    assert response.status_code == 200
    assert response.json() == {"message": "View recorded"}
