from fastapi import APIRouter
from fintrack.routes import accounts, categories, transactions, glossary

api_router = APIRouter()

api_router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
api_router.include_router(glossary.router, prefix="/glossary", tags=["glossary"])
