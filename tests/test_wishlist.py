import pytest

from marketplace.core.errors import NotFound
from marketplace.crud import wishlist as crud_wishlist
from marketplace.models.wishlist import WishlistItem

from conftest import API


def test_toggle_twice_restores_membership(db, make_user, make_product):
    user = make_user()
    product = make_product()

    assert crud_wishlist.toggle(db, user_id=user.id, product_id=product.id) is True
    assert crud_wishlist.is_member(db, user_id=user.id, product_id=product.id) is True
    assert crud_wishlist.toggle(db, user_id=user.id, product_id=product.id) is False
    assert crud_wishlist.is_member(db, user_id=user.id, product_id=product.id) is False


def test_odd_number_of_toggles_flips_membership(db, make_user, make_product):
    user = make_user()
    product = make_product()

    for _ in range(3):
        crud_wishlist.toggle(db, user_id=user.id, product_id=product.id)

    assert crud_wishlist.is_member(db, user_id=user.id, product_id=product.id) is True
    assert db.query(WishlistItem).count() == 1


def test_add_is_insert_or_ignore(db, make_user, make_product):
    user = make_user()
    product = make_product()

    assert crud_wishlist.add(db, user_id=user.id, product_id=product.id) is True
    assert crud_wishlist.add(db, user_id=user.id, product_id=product.id) is False
    assert db.query(WishlistItem).count() == 1


def test_toggle_unknown_product(db, make_user):
    user = make_user()
    with pytest.raises(NotFound):
        crud_wishlist.toggle(db, user_id=user.id, product_id=424242)


def test_list_excludes_inactive_products_without_deleting(db, make_user, make_product):
    user = make_user()
    visible = make_product(title="Silk Scarf")
    hidden = make_product(title="Sunglasses")
    crud_wishlist.add(db, user_id=user.id, product_id=visible.id)
    crud_wishlist.add(db, user_id=user.id, product_id=hidden.id)

    hidden.is_active = False
    db.commit()

    rows = crud_wishlist.list_items(db, user_id=user.id)
    assert [row.product_id for row in rows] == [visible.id]
    assert db.query(WishlistItem).count() == 2


def test_toggle_endpoint_status_codes(client, make_user, make_product, auth_headers):
    user = make_user()
    product = make_product()
    headers = auth_headers(user)

    added = client.post(f"{API}/wishlist/toggle", json={"productId": product.id}, headers=headers)
    assert added.status_code == 201
    assert added.json()["inWishlist"] is True

    check = client.get(f"{API}/wishlist/{product.id}", headers=headers)
    assert check.json() == {"message": None, "inWishlist": True}

    removed = client.post(f"{API}/wishlist/toggle", json={"productId": product.id}, headers=headers)
    assert removed.status_code == 200
    assert removed.json()["inWishlist"] is False


def test_list_endpoint_returns_products(client, make_user, make_product, auth_headers):
    user = make_user()
    product = make_product(title="Smart Plant Monitor", price=59.99)
    headers = auth_headers(user)
    client.post(f"{API}/wishlist/toggle", json={"productId": product.id}, headers=headers)

    body = client.get(f"{API}/wishlist", headers=headers).json()

    assert len(body) == 1
    assert body[0]["id"] == product.id
    assert body[0]["title"] == "Smart Plant Monitor"
    assert body[0]["price"] == pytest.approx(59.99)
    assert "addedAt" in body[0]


def test_toggle_unknown_product_endpoint(client, make_user, auth_headers):
    response = client.post(f"{API}/wishlist/toggle", json={"productId": 999}, headers=auth_headers(make_user()))
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}
