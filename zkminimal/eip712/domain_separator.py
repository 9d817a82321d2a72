from zkminimal.eip712.struct import EIP712Struct

# Field order of EIP712Domain as fixed by EIP-712
DOMAIN_FIELDS = [
    ("name", "string", str),
    ("version", "string", str),
    ("chainId", "uint256", int),
    ("verifyingContract", "address", None),
    ("salt", "bytes32", None),
]


def make_domain(
    name=None, version=None, chainId=None, verifyingContract=None, salt=None
) -> EIP712Struct:
    """Build the ``EIP712Domain`` struct; fields left as ``None`` are omitted from the type."""
    given = {
        "name": name,
        "version": version,
        "chainId": chainId,
        "verifyingContract": verifyingContract,
        "salt": salt,
    }
    if all(value is None for value in given.values()):
        raise ValueError("At least one argument must be given.")

    members = []
    values = {}
    for field, solidity_type, convert in DOMAIN_FIELDS:
        if given[field] is None:
            continue
        members.append((field, solidity_type))
        values[field] = convert(given[field]) if convert else given[field]
    return EIP712Struct("EIP712Domain", members, **values)
