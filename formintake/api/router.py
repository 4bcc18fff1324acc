from fastapi import APIRouter

from formintake.api.routes import forms
from formintake.api.routes import reports

api_router = APIRouter()
api_router.include_router(forms.router)
api_router.include_router(reports.router)
