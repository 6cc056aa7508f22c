# storefront/schemas.py
from pydantic import BaseModel
from typing import Union

# 📦 Адрес доставки (camelCase, как ожидает backend)
class ShippingAddress(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zipCode: str = ""
    country: str = "USA"
    phoneNumber: str = ""


class PaymentCreationRequest(BaseModel):
    shippingAddress: ShippingAddress
    currency: str = "USD"
    returnUrl: str
    cancelUrl: str


# 💳 Успешный ответ /api/payment/create после проверки обязательных полей
class PaymentCreated(BaseModel):
    orderId: Union[int, str]
    paypalOrderId: str
    approvalUrl: str


class PaymentCaptureRequest(BaseModel):
    orderId: Union[int, str]
    paypalOrderId: str


# 👤 Регистрация
class RegistrationRequest(BaseModel):
    username: str
    email: str
    password: str
    phoneNumber: str
