from fastapi import APIRouter
from marketplace.api.v1.endpoints import auth, products, categories, cart, wishlist, vendors, stories, users

api_router = APIRouter()

# Public catalog routes
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])

# Vendor listing is public, following requires a token per route
api_router.include_router(vendors.router, prefix="/vendors", tags=["vendors"])

# Story views are anonymous, everything else requires a token per route
api_router.include_router(stories.router, prefix="/stories", tags=["stories"])

# Per-user collections
api_router.include_router(cart.router, prefix="/cart", tags=["cart"])
api_router.include_router(wishlist.router, prefix="/wishlist", tags=["wishlist"])

# Account administration
api_router.include_router(users.router, prefix="/users", tags=["users"])
