"""Seller decisions on return requests: command and handler.

Approving a return does not put the units back into stock; restocking is
left to the seller.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.returns.return_request import ReturnRequest, ReturnStatus


@storefront.command(part_of="ReturnRequest")
class ReviewReturn:
    return_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command_handler(part_of=ReturnRequest)
class ReviewReturnHandler:
    @handle(ReviewReturn)
    def review_return(self, command):
        decision = (command.status or "").strip().lower()
        if decision not in (ReturnStatus.APPROVED.value, ReturnStatus.REJECTED.value):
            raise ValidationError({"status": ["Status must be approved or rejected"]})

        repo = current_domain.repository_for(ReturnRequest)
        return_request = repo.get(command.return_id)
        if decision == ReturnStatus.APPROVED.value:
            return_request.approve()
        else:
            return_request.reject()
        repo.add(return_request)

        logger.info("return_reviewed", return_id=str(return_request.id), status=decision)
