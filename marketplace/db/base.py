# Import all the models, so that Base has them before being
# imported by Alembic or used by create_all
from marketplace.db.session import Base  # noqa
from marketplace.models.user import User  # noqa
from marketplace.models.vendor import Vendor, VendorFollower  # noqa
from marketplace.models.category import Category  # noqa
from marketplace.models.product import Product, ProductImage, ProductTag  # noqa
from marketplace.models.cart import CartItem  # noqa
from marketplace.models.wishlist import WishlistItem  # noqa
from marketplace.models.story import VendorStory  # noqa
