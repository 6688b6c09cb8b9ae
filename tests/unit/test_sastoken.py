# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import pytest
import time
import urllib.parse
from iothub_sdk.exceptions import SasTokenError
from iothub_sdk.sastoken import (
    SasToken,
    SasTokenGenerator,
    SasTokenProvider,
    TOKEN_FORMAT,
    DEFAULT_TOKEN_UPDATE_MARGIN,
)
from iothub_sdk.signing_mechanism import SigningMechanism, SymmetricKeySigningMechanism

logging.basicConfig(level=logging.DEBUG)

FAKE_URI = "my.host.name"
FAKE_KEY = "NMgJDvdKTxjLi+xBxxkDDEwDJxEvOE5u8BiT0mVgPeg="
FAKE_SIGNED_DATA = "8NJRMT83CcplGrAGaUVIUM/md5914KpWVNngSVoF9/M="
FAKE_CURRENT_TIME = 10000000000.0


def token_parser(token_str):
    """helper function that parses a token string for individual values"""
    kv_string = token_str.split(" ")[1]
    return dict(kv.split("=", 1) for kv in kv_string.split("&"))


@pytest.fixture
def sastoken_str():
    return TOKEN_FORMAT.format(
        resource=urllib.parse.quote(FAKE_URI, safe=""),
        signature=urllib.parse.quote(FAKE_SIGNED_DATA, safe=""),
        expiry=int(time.time()) + 3600,
    )


@pytest.fixture
def mock_signing_mechanism(mocker):
    mock_sm = mocker.MagicMock(spec=SigningMechanism)
    mock_sm.sign_resource.return_value = FAKE_SIGNED_DATA
    mock_sm.key_name = None
    return mock_sm


@pytest.mark.describe("SasToken")
class TestSasToken:
    @pytest.mark.it("Instantiates from a valid SAS Token string")
    def test_instantiates(self, sastoken_str):
        s = SasToken(sastoken_str)
        assert str(s) == sastoken_str

    @pytest.mark.it("Raises ValueError if instantiating from an invalid SAS Token string")
    @pytest.mark.parametrize(
        "invalid_token_str",
        [
            pytest.param("sr=some%2Fresource&sig=signature&se=12321312", id="Incomplete format"),
            pytest.param(
                "SharedAccessSignature sr=some%2Fresource&sig=signature", id="Missing expiry"
            ),
            pytest.param("SharedAccessSignature sr&sig&se", id="Missing values"),
        ],
    )
    def test_invalid(self, invalid_token_str):
        with pytest.raises(ValueError):
            SasToken(invalid_token_str)

    @pytest.mark.it("Exposes the expiry time, resource URI and signature as read-only properties")
    def test_properties(self, sastoken_str):
        s = SasToken(sastoken_str)
        assert s.expiry_time == float(token_parser(sastoken_str)["se"])
        assert s.resource_uri == FAKE_URI
        assert s.signature == FAKE_SIGNED_DATA
        with pytest.raises(AttributeError):
            s.expiry_time = 12

    @pytest.mark.it("Exposes the shared access policy name (skn) if present, otherwise None")
    def test_key_name(self, sastoken_str):
        assert SasToken(sastoken_str).key_name is None
        assert SasToken(sastoken_str + "&skn=iothubowner").key_name == "iothubowner"


@pytest.mark.describe("SasTokenGenerator - .generate_sastoken()")
class TestSasTokenGeneratorGenerateSastoken:
    @pytest.mark.it(
        "Signs the resource URI with an expiry of the current time plus the TTL, and returns a SasToken"
    )
    @pytest.mark.parametrize("ttl", [pytest.param(3600, id="1 hour"), pytest.param(60, id="1 minute")])
    async def test_generate(self, mocker, mock_signing_mechanism, ttl):
        mocker.patch.object(time, "time", return_value=FAKE_CURRENT_TIME)
        generator = SasTokenGenerator(mock_signing_mechanism, FAKE_URI, ttl)
        expected_expiry = int(FAKE_CURRENT_TIME) + ttl

        token = await generator.generate_sastoken()

        assert mock_signing_mechanism.sign_resource.await_count == 1
        assert mock_signing_mechanism.sign_resource.await_args == mocker.call(
            FAKE_URI, expected_expiry
        )
        assert isinstance(token, SasToken)
        assert token.expiry_time == expected_expiry
        assert token.signature == FAKE_SIGNED_DATA
        assert token.resource_uri == FAKE_URI
        assert token.key_name is None

    @pytest.mark.it("Includes the key name of the signing mechanism as the 'skn' field, if any")
    async def test_key_name(self, mock_signing_mechanism):
        mock_signing_mechanism.key_name = "iothubowner"
        generator = SasTokenGenerator(mock_signing_mechanism, FAKE_URI)

        token = await generator.generate_sastoken()
        assert token_parser(str(token))["skn"] == "iothubowner"
        assert token.key_name == "iothubowner"

    @pytest.mark.it("Produces a token verifiable with the symmetric key")
    async def test_real_signature(self):
        sm = SymmetricKeySigningMechanism(FAKE_KEY, key_name="iothubowner")
        generator = SasTokenGenerator(sm, FAKE_URI)

        token = await generator.generate_sastoken()
        expected = await sm.sign_resource(FAKE_URI, int(token.expiry_time))
        assert token.signature == expected

    @pytest.mark.it("Raises SasTokenError if the signing mechanism raises an exception")
    async def test_signing_failure(self, mock_signing_mechanism, arbitrary_exception):
        mock_signing_mechanism.sign_resource.side_effect = arbitrary_exception
        generator = SasTokenGenerator(mock_signing_mechanism, FAKE_URI)

        with pytest.raises(SasTokenError) as e_info:
            await generator.generate_sastoken()
        assert e_info.value.__cause__ is arbitrary_exception


@pytest.mark.describe("SasTokenProvider - .get_current_sastoken()")
class TestSasTokenProviderGetCurrentSastoken:
    @pytest.fixture
    def generator(self, mock_signing_mechanism):
        return SasTokenGenerator(mock_signing_mechanism, FAKE_URI, ttl=3600)

    @pytest.mark.it("Generates a SasToken on first use")
    async def test_first_use(self, mocker, generator):
        spy_generate = mocker.spy(generator, "generate_sastoken")
        provider = SasTokenProvider(generator)
        assert spy_generate.call_count == 0

        token = await provider.get_current_sastoken()
        assert spy_generate.call_count == 1
        assert isinstance(token, SasToken)

    @pytest.mark.it("Returns the same SasToken while it is outside the update margin of expiry")
    async def test_reuse(self, mocker, generator):
        spy_generate = mocker.spy(generator, "generate_sastoken")
        provider = SasTokenProvider(generator)

        token1 = await provider.get_current_sastoken()
        token2 = await provider.get_current_sastoken()
        assert token1 is token2
        assert spy_generate.call_count == 1

    @pytest.mark.it("Generates a new SasToken once the current one is within the update margin")
    async def test_regenerate(self, mocker, generator):
        spy_generate = mocker.spy(generator, "generate_sastoken")
        provider = SasTokenProvider(generator)
        token1 = await provider.get_current_sastoken()

        mocker.patch.object(
            time, "time", return_value=token1.expiry_time - DEFAULT_TOKEN_UPDATE_MARGIN + 1
        )
        token2 = await provider.get_current_sastoken()
        assert token2 is not token1
        assert spy_generate.call_count == 2

    @pytest.mark.it("Allows SasTokenError raised during generation to propagate")
    async def test_error(self, mocker, generator):
        mocker.patch.object(generator, "generate_sastoken", side_effect=SasTokenError("fake"))
        provider = SasTokenProvider(generator)
        with pytest.raises(SasTokenError):
            await provider.get_current_sastoken()
