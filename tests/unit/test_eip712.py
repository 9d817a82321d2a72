from unittest import TestCase

from eth_utils import keccak

from zkminimal.eip712 import EIP712Struct, make_domain

PERSON_MEMBERS = [("name", "string"), ("wallet", "address")]


def make_person(name, wallet) -> EIP712Struct:
    return EIP712Struct("Person", PERSON_MEMBERS, name=name, wallet=wallet)


def make_mail(from_, to, content) -> EIP712Struct:
    members = [("from", from_), ("to", to), ("contents", "string")]
    kwargs = {
        'to': to,
        'from': from_,
        'contents': content
    }
    return EIP712Struct("Mail", members, **kwargs)


class TestEIP712Structured(TestCase):
    DOMAIN_SEPARATOR = "f2cee375fa42b42143804025fc449deafd50cc031ca257e0b194a650a912090f"
    MAIL_HASH = "c52c0ee5d84264471806290a3f2c4cecfc5490626bf912d01f240d7a274b371e"
    DIGEST = "be609aee343fb3c4b28e1df9e632fca64fcfaede20f02e86244efddf30957bd2"

    def setUp(self) -> None:
        self.person_from = make_person("Cow", "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826")
        self.person_to = make_person("Bob", "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB")
        self.mail = make_mail(from_=self.person_from, to=self.person_to, content="Hello, Bob!")
        self.domain = make_domain(name="Ether Mail",
                                  version="1",
                                  chainId=1,
                                  verifyingContract="0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC")

    def test_encode_type(self):
        result = self.mail.encode_type()
        self.assertEqual('Mail(Person from,Person to,string contents)Person(string name,address wallet)', result)

    def test_hash_encoded_type(self):
        result = self.mail.type_hash()
        self.assertEqual('a0cedeb2dc280ba39b857546d74f5549c3a1d7bdc2dd96bf881f76108e23dac2', result.hex())

    def test_domain_type(self):
        self.assertEqual(
            "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)",
            self.domain.encode_type(),
        )

    def test_signable_message(self):
        msg = self.mail.signable_message(self.domain)
        self.assertEqual(self.DOMAIN_SEPARATOR, msg.header.hex())
        self.assertEqual(self.MAIL_HASH, msg.body.hex())

    def test_signing_digest(self):
        signable = self.mail.signable_bytes(self.domain)
        self.assertEqual(b"\x19\x01", signable[:2])
        self.assertEqual(self.DIGEST, self.mail.signing_digest(self.domain).hex())
        self.assertEqual(keccak(signable), self.mail.signing_digest(self.domain))

    def test_nested_data(self):
        data = self.mail.data()
        self.assertEqual({"name": "Cow", "wallet": "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"}, data["from"])

    def test_missing_value(self):
        with self.assertRaises(ValueError):
            EIP712Struct("Person", PERSON_MEMBERS, name="Cow")

    def test_empty_domain(self):
        with self.assertRaises(ValueError):
            make_domain()
