"""
Unit of Work

Transaction boundary for one checkout. Repositories built on the same
session only flush; this commits or rolls back everything at once.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domains.ecommerce.application.ports import IUnitOfWork

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(IUnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        logger.debug("Rolling back checkout transaction")
        await self.session.rollback()
