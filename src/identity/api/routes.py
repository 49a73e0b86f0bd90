"""FastAPI endpoints for the Identity domain."""

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from identity.api.schemas import (
    ChangeRoleRequest,
    ChangeStatusRequest,
    CustomerIdResponse,
    CustomerPageResponse,
    CustomerResponse,
    PasswordResetRequest,
    RegisterCustomerRequest,
    RequestEmailChangeRequest,
    StatusResponse,
    TokenRequest,
    UpdateProfileRequest,
)
from identity.customer.account import (
    ChangeAccountStatus,
    ChangeRole,
    DeleteAccount,
    RequestAccountDeletion,
)
from identity.customer.customer import Customer
from identity.customer.profile import UpdateProfile
from identity.customer.queries import customer_to_dict, list_customers
from identity.customer.registration import RegisterCustomer
from identity.customer.verification import (
    ConfirmEmailChange,
    RequestEmailChange,
    RequestPasswordReset,
    VerifyEmail,
)

router = APIRouter(prefix="/customers", tags=["customers"])
admin_router = APIRouter(prefix="/admin/customers", tags=["admin"])


@router.post("", status_code=201, response_model=CustomerIdResponse)
async def register_customer(body: RegisterCustomerRequest) -> CustomerIdResponse:
    command = RegisterCustomer(name=body.name, email=body.email, image=body.image)
    result = current_domain.process(command, asynchronous=False)
    return CustomerIdResponse(customer_id=result)


@router.post("/password-reset", status_code=202, response_model=StatusResponse)
async def request_password_reset(body: PasswordResetRequest) -> StatusResponse:
    current_domain.process(RequestPasswordReset(email=body.email), asynchronous=False)
    return StatusResponse(status="accepted")


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str) -> CustomerResponse:
    customer = current_domain.repository_for(Customer).get(customer_id)
    return CustomerResponse(**customer_to_dict(customer))


@router.put("/{customer_id}/verify-email", response_model=StatusResponse)
async def verify_email(customer_id: str, body: TokenRequest) -> StatusResponse:
    current_domain.process(VerifyEmail(customer_id=customer_id, token=body.token), asynchronous=False)
    return StatusResponse()


@router.post("/{customer_id}/email-change", status_code=202, response_model=StatusResponse)
async def request_email_change(customer_id: str, body: RequestEmailChangeRequest) -> StatusResponse:
    command = RequestEmailChange(customer_id=customer_id, new_email=body.new_email)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="accepted")


@router.put("/{customer_id}/email-change", response_model=StatusResponse)
async def confirm_email_change(customer_id: str, body: TokenRequest) -> StatusResponse:
    current_domain.process(ConfirmEmailChange(customer_id=customer_id, token=body.token), asynchronous=False)
    return StatusResponse()


@router.put("/{customer_id}/profile", response_model=StatusResponse)
async def update_profile(customer_id: str, body: UpdateProfileRequest) -> StatusResponse:
    command = UpdateProfile(customer_id=customer_id, name=body.name, image=body.image)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.post("/{customer_id}/deletion", status_code=202, response_model=StatusResponse)
async def request_account_deletion(customer_id: str) -> StatusResponse:
    current_domain.process(RequestAccountDeletion(customer_id=customer_id), asynchronous=False)
    return StatusResponse(status="accepted")


@router.put("/{customer_id}/deletion", response_model=StatusResponse)
async def delete_account(customer_id: str, body: TokenRequest) -> StatusResponse:
    current_domain.process(DeleteAccount(customer_id=customer_id, token=body.token), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------
@admin_router.get("", response_model=CustomerPageResponse)
async def search_customers(
    search: str | None = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
) -> CustomerPageResponse:
    return CustomerPageResponse(**list_customers(search=search, page=page, page_size=page_size))


@admin_router.put("/{customer_id}/role", response_model=StatusResponse)
async def change_role(customer_id: str, body: ChangeRoleRequest) -> StatusResponse:
    current_domain.process(ChangeRole(customer_id=customer_id, role=body.role), asynchronous=False)
    return StatusResponse()


@admin_router.put("/{customer_id}/status", response_model=StatusResponse)
async def change_status(customer_id: str, body: ChangeStatusRequest) -> StatusResponse:
    command = ChangeAccountStatus(customer_id=customer_id, status=body.status, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
