from fastapi import APIRouter

from src.dao_cooperative.router import router as governance_router
from src.utils.logger import logger

router = APIRouter()

router.include_router(governance_router)
logger.info("✅ Governance routes mounted under /governance")
