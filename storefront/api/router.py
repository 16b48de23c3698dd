from fastapi import APIRouter

from storefront.domains.ecommerce.api import routes as checkout_routes

api_router = APIRouter()

api_router.include_router(checkout_routes.router)
