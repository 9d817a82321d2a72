from zkminimal.eip712.struct import EIP712Struct
from zkminimal.eip712.domain_separator import make_domain

__all__ = ["EIP712Struct", "make_domain"]
