"""Use cases do canal USSD."""

from app.use_cases.ussd.process_ussd_request import ProcessUssdRequestUseCase

__all__ = ["ProcessUssdRequestUseCase"]
