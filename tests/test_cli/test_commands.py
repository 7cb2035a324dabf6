"""
Test suite for the cw4973 command-line operations.

Tests: 1) Each operation sends the right contract messages with the right
sender, gas and memo 2) Permits produced by mint/give verify against the
agreement the contract checks 3) main() exit codes and JSON output
"""
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "test_adapter"))

from test_mocks import (
    MOCK_DEPLOYER_MNEMONIC,
    MOCK_SERENITY,
    MOCK_TESTER_MNEMONIC,
    MOCK_URI,
    MOCK_OTHER_URI,
    RecordingChainClient,
    address_of,
    create_deployer_wallet,
    create_tester_wallet,
)

from aura_abt.adapters.cosmos.schemas import PermitSignature
from aura_abt.adapters.cosmos.verifies import verify_agreement
from aura_abt.cli import build_context, main
from aura_abt.cli import commands
from aura_abt.engine.exceptions import ConfigurationError
from aura_abt.schemas.bases import VerificationStatus

CONTRACT = "aura1contract"


@pytest.fixture
def chain():
    return RecordingChainClient(query_responses={
        "nft_info": {"token_uri": MOCK_URI, "extension": None},
        "owner_of": {"owner": "aura1tester", "approvals": []},
        "tokens": {"tokens": []},
    })


@pytest.fixture
def ctx(chain):
    return commands.OperationContext(
        config=MOCK_SERENITY,
        client_factory=lambda config: chain,
        deployer_factory=create_deployer_wallet,
        tester_factory=create_tester_wallet,
    )


@pytest.fixture
def deployer_address():
    return address_of(create_deployer_wallet())


@pytest.fixture
def tester_address():
    return address_of(create_tester_wallet())


# ========================================================================
# Deployment
# ========================================================================

class TestDeployment:

    def test_store(self, ctx, chain, deployer_address):
        confirmation = commands.store(ctx, "build/cw4973.wasm")
        (call,) = chain.calls
        assert call["op"] == "upload"
        assert call["wasm_path"] == "build/cw4973.wasm"
        assert call["gas_limit"] == 2_500_000
        assert address_of(call["sender"]) == deployer_address
        assert confirmation.code_id == 7

    def test_instantiate(self, ctx, chain, deployer_address):
        confirmation = commands.instantiate(ctx, 7)
        (call,) = chain.calls
        assert call["code_id"] == 7
        assert call["init_msg"] == {"name": "AURA ACCOUNT BOUND", "symbol": "AAB", "minter": deployer_address}
        assert call["label"] == "Instantiate contract"
        assert call["gas_limit"] == 200_000
        assert confirmation.contract_address == "aura1contract"

    def test_instantiate_custom_name(self, ctx, chain):
        commands.instantiate(ctx, 7, name="Badges", symbol="BDG")
        assert chain.calls[0]["init_msg"]["name"] == "Badges"
        assert chain.calls[0]["init_msg"]["symbol"] == "BDG"


# ========================================================================
# Minting
# ========================================================================

class TestMint:

    def test_tester_takes_from_deployer(self, ctx, chain, deployer_address, tester_address):
        result = commands.mint(ctx, CONTRACT, MOCK_URI)

        (call,) = chain.calls
        assert call["op"] == "execute"
        assert call["contract"] == CONTRACT
        assert address_of(call["sender"]) == tester_address
        assert call["gas_limit"] == 250_000
        assert call["memo"] == "take nft"

        take = call["payload"]["take"]
        assert take["from"] == deployer_address
        assert take["uri"] == MOCK_URI
        assert result["execute_msg"] == call["payload"]
        assert result["message"].endswith(tester_address + deployer_address + MOCK_URI)

    def test_permit_verifies_as_contract_would(self, ctx, chain, deployer_address, tester_address):
        commands.mint(ctx, CONTRACT, MOCK_URI)
        envelope = PermitSignature.from_json(chain.calls[0]["payload"]["take"]["signature"])
        result = verify_agreement(envelope, MOCK_SERENITY.chain_id, tester_address, deployer_address, MOCK_URI)
        assert result.is_success()

    def test_permit_bound_to_uri(self, ctx, chain, deployer_address, tester_address):
        commands.mint(ctx, CONTRACT, MOCK_URI)
        envelope = PermitSignature.from_json(chain.calls[0]["payload"]["take"]["signature"])
        result = verify_agreement(envelope, MOCK_SERENITY.chain_id, tester_address, deployer_address, MOCK_OTHER_URI)
        assert result.status == VerificationStatus.INVALID_SIGNATURE


class TestGive:

    def test_deployer_gives_to_tester(self, ctx, chain, deployer_address, tester_address):
        result = commands.give(ctx, CONTRACT, MOCK_URI)

        (call,) = chain.calls
        assert address_of(call["sender"]) == deployer_address
        assert call["memo"] == "give nft"
        assert call["gas_limit"] == 250_000
        give = call["payload"]["give"]
        assert give["to"] == tester_address
        assert result["confirmation"]["tx_hash"]

        envelope = PermitSignature.from_json(give["signature"])
        verified = verify_agreement(envelope, MOCK_SERENITY.chain_id, deployer_address, tester_address, MOCK_URI)
        assert verified.is_success()


# ========================================================================
# Token management
# ========================================================================

class TestTokenManagement:

    def test_transfer(self, ctx, chain, tester_address):
        commands.transfer(ctx, CONTRACT, "1", "aura1recipient")
        (call,) = chain.calls
        assert address_of(call["sender"]) == tester_address
        assert call["payload"] == {"transfer_nft": {"recipient": "aura1recipient", "token_id": "1"}}
        assert call["memo"] == "transfer nft"
        assert call["gas_limit"] is None

    def test_unequip_sequence(self, ctx, chain, tester_address):
        result = commands.unequip(ctx, CONTRACT, "1")

        ops = [(c["op"], next(iter(c.get("query") or c.get("payload")))) for c in chain.calls]
        assert ops == [
            ("query", "nft_info"),
            ("query", "owner_of"),
            ("execute", "unequip"),
            ("query", "tokens"),
        ]
        assert chain.calls[3]["query"] == {"tokens": {"owner": tester_address}}
        assert chain.calls[2]["memo"] == "unequip nft"
        assert result["nft_info"]["token_uri"] == MOCK_URI
        assert result["remaining_tokens"] == {"tokens": []}


# ========================================================================
# Offline sign / verify
# ========================================================================

class TestOfflinePermits:

    def test_sign_defaults_passive_to_wallet(self):
        wallet = create_deployer_wallet()
        permit = commands.sign_permit(MOCK_SERENITY, wallet, "aura1active", MOCK_URI)
        assert permit.passive == address_of(wallet)
        assert permit.chain_id == MOCK_SERENITY.chain_id

        result = commands.verify_permit(MOCK_SERENITY, "aura1active", permit.passive, MOCK_URI, permit.signature)
        assert result.is_success()

    def test_verify_wrong_passive(self, tester_address):
        permit = commands.sign_permit(MOCK_SERENITY, create_deployer_wallet(), "aura1active", MOCK_URI)
        result = commands.verify_permit(MOCK_SERENITY, "aura1active", tester_address, MOCK_URI, permit.signature)
        assert not result.is_success()

    def test_wallets_are_built_lazily(self):
        def fail():
            raise ConfigurationError("MNEMONIC is not set")

        ctx = commands.OperationContext(
            config=MOCK_SERENITY,
            client_factory=lambda config: RecordingChainClient(),
            deployer_factory=fail,
            tester_factory=fail,
        )
        permit = commands.sign_permit(MOCK_SERENITY, create_tester_wallet(), "aura1active", MOCK_URI)
        assert commands.verify_permit(ctx.config, "aura1active", permit.passive, MOCK_URI, permit.signature).is_success()
        with pytest.raises(ConfigurationError):
            ctx.deployer


# ========================================================================
# main()
# ========================================================================

class TestMain:

    def test_mint_prints_json(self, ctx, capsys):
        code = main(["--chain", "serenity", "mint", CONTRACT, MOCK_URI], context_builder=lambda config: ctx)
        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["execute_msg"]["take"]["uri"] == MOCK_URI
        assert output["confirmation"]["status"] == "success"

    def test_sign_then_verify(self, monkeypatch, capsys, tmp_path):
        monkeypatch.setenv("MNEMONIC", MOCK_DEPLOYER_MNEMONIC)
        monkeypatch.setenv("TESTER_MNEMONIC", MOCK_TESTER_MNEMONIC)
        monkeypatch.delenv("CHAIN_ID", raising=False)

        assert main(["sign", MOCK_URI, "--active", "aura1active"]) == 0
        signed = json.loads(capsys.readouterr().out)
        assert signed["chain_id"] == "serenity-testnet-001"

        envelope = tmp_path / "permit.json"
        envelope.write_text(json.dumps(signed["signature"]))
        assert main(["verify", "aura1active", signed["passive"], MOCK_URI, f"@{envelope}"]) == 0
        assert json.loads(capsys.readouterr().out)["status"] == VerificationStatus.SUCCESS.value

        assert main(["verify", "aura1active", signed["passive"], MOCK_OTHER_URI, json.dumps(signed["signature"])]) == 1
        assert json.loads(capsys.readouterr().out)["status"] == VerificationStatus.INVALID_SIGNATURE.value

    def test_verify_on_other_chain_fails(self, monkeypatch, capsys):
        monkeypatch.setenv("MNEMONIC", MOCK_DEPLOYER_MNEMONIC)
        assert main(["--chain", "serenity", "sign", MOCK_URI, "--active", "aura1active"]) == 0
        signed = json.loads(capsys.readouterr().out)
        code = main(["--chain", "euphoria", "verify", "aura1active", signed["passive"], MOCK_URI,
                     json.dumps(signed["signature"])])
        assert code == 1

    def test_missing_mnemonic(self, monkeypatch, capsys):
        monkeypatch.delenv("MNEMONIC", raising=False)
        assert main(["sign", MOCK_URI, "--active", "aura1active"]) == 1
        assert capsys.readouterr().out == ""

    def test_malformed_permit_argument(self, capsys):
        assert main(["verify", "a", "b", MOCK_URI, "{not json"], context_builder=build_context) == 1

    def test_missing_permit_file(self, tmp_path):
        assert main(["verify", "a", "b", MOCK_URI, f"@{tmp_path / 'nope.json'}"]) == 1

    def test_unknown_chain_from_env(self, monkeypatch):
        monkeypatch.setenv("CHAIN_ID", "nowhere")
        assert main(["verify", "a", "b", MOCK_URI, "{}"]) == 1

    def test_unknown_chain_flag(self):
        with pytest.raises(SystemExit):
            main(["--chain", "nowhere", "verify", "a", "b", MOCK_URI, "{}"])
