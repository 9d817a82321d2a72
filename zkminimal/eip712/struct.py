from typing import Dict, List, Tuple, Union

from eth_account.messages import SignableMessage, encode_typed_data
from eth_utils import keccak

MemberType = Union[str, "EIP712Struct"]


class EIP712Struct:
    """A typed-data struct: an ordered list of ``(name, type)`` members plus their values.

    A member type is either a solidity type string (``uint256``, ``bytes``,
    ``bytes32[]``, ...) or another ``EIP712Struct`` whose type gets included
    in the encoded type of the outer struct.
    """

    def __init__(self, type_name: str, members: List[Tuple[str, MemberType]], **values):
        missing = [name for name, _ in members if name not in values]
        if missing:
            raise ValueError(f"{type_name} is missing values for: {', '.join(missing)}")
        self.type_name = type_name
        self.members = members
        self.values = values

    def get_data_value(self, name: str):
        return self.values[name]

    def types(self) -> Dict[str, List[dict]]:
        result = {self.type_name: []}
        for name, member_type in self.members:
            if isinstance(member_type, EIP712Struct):
                result[self.type_name].append({"name": name, "type": member_type.type_name})
                result.update(member_type.types())
            else:
                result[self.type_name].append({"name": name, "type": member_type})
        return result

    def encode_type(self) -> str:
        types = self.types()

        def encode_one(type_name: str) -> str:
            members = ",".join(f"{m['type']} {m['name']}" for m in types[type_name])
            return f"{type_name}({members})"

        dependencies = sorted(t for t in types if t != self.type_name)
        return encode_one(self.type_name) + "".join(encode_one(t) for t in dependencies)

    def type_hash(self) -> bytes:
        return keccak(text=self.encode_type())

    def data(self) -> dict:
        result = {}
        for name, member_type in self.members:
            value = self.values[name]
            result[name] = value.data() if isinstance(value, EIP712Struct) else value
        return result

    def to_message(self, domain: "EIP712Struct") -> dict:
        types = domain.types()
        types.update(self.types())
        return {
            "types": types,
            "primaryType": self.type_name,
            "domain": domain.data(),
            "message": self.data(),
        }

    def signable_message(self, domain: "EIP712Struct") -> SignableMessage:
        return encode_typed_data(full_message=self.to_message(domain))

    def signable_bytes(self, domain: "EIP712Struct") -> bytes:
        msg = self.signable_message(domain)
        return b"\x19" + msg.version + msg.header + msg.body

    def signing_digest(self, domain: "EIP712Struct") -> bytes:
        return keccak(self.signable_bytes(domain))
