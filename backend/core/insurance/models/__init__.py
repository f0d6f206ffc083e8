from insurance.models.claim import Claim
from insurance.models.intermediary import Intermediary
from insurance.models.policy import Policy
from insurance.models.product import Product
from insurance.models.quote import Quote

__all__ = [
    "Claim",
    "Intermediary",
    "Policy",
    "Product",
    "Quote",
]
