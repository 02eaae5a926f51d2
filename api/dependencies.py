"""
API dependencies - composition root for application services
"""
from application.services.payment_service import PaymentService
from infrastructure.external.payments import get_payment_gateway
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork


async def get_payment_service() -> PaymentService:
    # Inject the gateway adapter (implements the application port)
    return PaymentService(gateway=get_payment_gateway(), uow_factory=SQLAlchemyUnitOfWork)
