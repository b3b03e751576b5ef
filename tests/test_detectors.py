"""Tests for the six risk detectors and finding helpers."""

import pytest

from riskscan.core.output import MAX_SNIPPET_LENGTH
from riskscan.core.severity import RiskType, Severity
from riskscan.detectors import (
    DangerousFunctionsDetector,
    Detector,
    EconomicDetector,
    FundControlDetector,
    MintingDetector,
    OwnershipDetector,
    UpgradeDetector,
    create_finding,
    default_detectors,
)
from riskscan.detectors.base import extract_code_snippet, inherits_from, inherits_matching
from riskscan.parser import parse


def types_of(findings):
    return [f.type for f in findings]


# Finding helpers


def test_create_finding_uses_type_table():
    """Severity and weight come from the risk type."""
    finding = create_finding(RiskType.SELFDESTRUCT, "selfdestruct(owner);", 12, "reason")

    assert finding.severity == Severity.CRITICAL
    assert finding.weight == 4.0
    assert finding.function_name is None


def test_create_finding_cleans_snippet():
    """Lines are trimmed, blank lines dropped and length capped."""
    finding = create_finding(RiskType.TX_ORIGIN, "   a  \n\n   b\n", 3, "reason")
    assert finding.code_snippet == "a\nb"

    long_finding = create_finding(RiskType.TX_ORIGIN, "x" * 2000, 3, "reason")
    assert len(long_finding.code_snippet) == MAX_SNIPPET_LENGTH


def test_create_finding_clamps_unknown_line():
    finding = create_finding(RiskType.UNCHECKED_CALL, "call", -5, "reason", "", "")

    assert finding.line_number == 0
    assert finding.function_name is None
    assert finding.modifier_name is None


def test_extract_code_snippet_bounds():
    lines = ("a", "b", "c", "d")

    assert extract_code_snippet(lines, 0) == "a\nb"
    assert extract_code_snippet(lines, 2) == "b\nc\nd"
    assert extract_code_snippet(lines, -1) == ""
    assert extract_code_snippet(lines, 10) == ""


def test_inherits_from_ignores_prose():
    """An inheritance marker needs a real `contract X is ...` clause."""
    assert inherits_from(parse("contract A is Ownable, Pausable {}"), "Pausable")
    assert not inherits_from(parse("// This contract is Pausable by design"), "Pausable")
    assert not inherits_from(parse("contract A is ERC20Pausable {}"), "Pausable")


def test_inherits_matching_base_pattern():
    pattern = r"\w*Pausable\w*"

    assert inherits_matching(parse("contract A is Ownable, ERC20PausableUpgradeable {}"), pattern)
    assert not inherits_matching(parse("// This contract is Pausable by design"), pattern)
    assert not inherits_matching(parse("contract A is Ownable {\n    bool pausable;\n}"), pattern)


def test_default_detectors_satisfy_protocol():
    detectors = default_detectors()

    assert [d.name for d in detectors] == [
        "MintingDetector",
        "FundControlDetector",
        "OwnershipDetector",
        "UpgradeDetector",
        "DangerousFunctionsDetector",
        "EconomicDetector",
    ]
    assert [d.pattern_count for d in detectors] == [2, 6, 3, 3, 3, 4]
    assert all(isinstance(d, Detector) for d in detectors)


# MintingDetector


def test_unlimited_minting(unlimited_mint):
    findings = MintingDetector().detect(parse(unlimited_mint))

    assert types_of(findings) == [RiskType.UNLIMITED_MINTING]
    assert findings[0].line_number == 6
    assert findings[0].function_name == "mint"
    assert findings[0].code_snippet.startswith("function mint(address to, uint256 amount) public {")


def test_capped_owner_minting(capped_owner_mint):
    """A MAX_SUPPLY constant removes the unlimited finding."""
    findings = MintingDetector().detect(parse(capped_owner_mint))

    assert types_of(findings) == [RiskType.OWNER_RESTRICTED_MINTING]
    assert findings[0].line_number == 12
    assert findings[0].modifier_name == "onlyOwner"


def test_supply_check_in_body_counts_as_cap():
    source = """contract A {
    function mint(address to, uint256 amount) external {
        require(totalSupply + amount <= 1000, "cap");
        balances[to] += amount;
    }
}"""
    assert MintingDetector().detect(parse(source)) == []


def test_inline_owner_check_restricts_minting():
    source = """contract A {
    uint256 public maxSupply;

    function mint(address to, uint256 amount) external {
        require(msg.sender == owner, "only owner");
        balances[to] += amount;
    }
}"""
    findings = MintingDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.OWNER_RESTRICTED_MINTING]
    assert findings[0].modifier_name is None


def test_minting_emits_both_types_per_function():
    source = """contract A {
    function mint(address to) external onlyMinter {
        _mint(to, 1);
    }
}"""
    findings = MintingDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.UNLIMITED_MINTING, RiskType.OWNER_RESTRICTED_MINTING]


def test_role_hash_modifier_restricts_minting():
    source = """contract A {
    function mint(address to, uint256 amount) external onlyRole(keccak256("MINTER_ROLE")) {
        _mint(to, amount);
    }
}"""
    findings = MintingDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.UNLIMITED_MINTING, RiskType.OWNER_RESTRICTED_MINTING]
    assert findings[0].line_number == 2
    assert findings[1].modifier_name == "onlyRole"


# FundControlDetector


def test_fund_control(treasury_contract):
    findings = FundControlDetector().detect(parse(treasury_contract))

    assert types_of(findings) == [
        RiskType.WITHDRAW_FUNCTION,
        RiskType.EMERGENCY_WITHDRAWAL,
        RiskType.BALANCE_MANIPULATION,
    ]
    assert [f.function_name for f in findings] == ["withdraw", "emergencyExit", "setBalance"]
    assert [f.line_number for f in findings] == [12, 16, 20]


def test_public_withdraw_is_not_flagged():
    """Users withdrawing their own funds is not owner control."""
    source = """contract A {
    function withdraw(uint256 amount) external {
        balances[msg.sender] -= amount;
        payable(msg.sender).transfer(amount);
    }
}"""
    assert FundControlDetector().detect(parse(source)) == []


def test_constructor_balance_writes_are_ignored():
    source = """contract A {
    constructor() onlyOwner {
        balances[msg.sender] = 1000;
    }

    function transferFrom(address from, address to, uint256 amount) external onlyOwner {
        balances[from] = balances[from] - amount;
    }
}"""
    assert FundControlDetector().detect(parse(source)) == []


def test_emergency_withdrawal_without_owner_gate():
    """Anyone can call it, so only the emergency finding applies."""
    source = """contract A {
    function emergencyWithdraw() external {
        payable(msg.sender).transfer(address(this).balance);
    }
}"""
    findings = FundControlDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.EMERGENCY_WITHDRAWAL]
    assert findings[0].line_number == 2
    assert findings[0].function_name == "emergencyWithdraw"
    assert findings[0].modifier_name is None


# OwnershipDetector


def test_centralized_ownership(centralized_contract):
    findings = OwnershipDetector().detect(parse(centralized_contract))

    assert types_of(findings) == [RiskType.CENTRALIZED_OWNERSHIP]
    finding = findings[0]
    assert finding.line_number == 13
    assert finding.function_name == "setLimit, setActive, setOwner"
    assert finding.code_snippet == "3 owner-controlled functions: setLimit, setActive, setOwner"


def test_below_centralization_threshold(owner_selfdestruct):
    assert OwnershipDetector().detect(parse(owner_selfdestruct)) == []


def test_pausable_and_single_step_transfer(pausable_token):
    findings = OwnershipDetector().detect(parse(pausable_token))

    assert types_of(findings) == [
        RiskType.CENTRALIZED_OWNERSHIP,
        RiskType.PAUSABLE_CONTRACT,
        RiskType.OWNERSHIP_TRANSFER,
    ]
    assert findings[1].function_name == "pause"
    assert findings[1].line_number == 4
    assert findings[2].function_name == "transferOwnership"
    assert findings[2].line_number == 12


def test_two_step_transfer_is_not_flagged(pausable_token):
    source = pausable_token.replace("Ownable {", "Ownable2Step {")
    findings = OwnershipDetector().detect(parse(source))

    assert RiskType.OWNERSHIP_TRANSFER not in types_of(findings)


def test_pausable_through_modifier_only():
    source = """contract A {
    function buy() external whenNotPaused {
        count += 1;
    }
}"""
    findings = OwnershipDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.PAUSABLE_CONTRACT]
    assert findings[0].line_number == 1
    assert findings[0].function_name == "pause mechanism"


@pytest.mark.parametrize(
    "base",
    ["ERC20PausableUpgradeable", "PausableUpgradeable", "ERC1155Pausable", "ERC721Pausable"],
)
def test_pausable_base_variants(base):
    source = f"""contract T is {base}, OwnableUpgradeable {{
    function foo() external {{
    }}
}}"""
    findings = OwnershipDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.PAUSABLE_CONTRACT]
    assert findings[0].line_number == 1
    assert findings[0].function_name == "pause mechanism"


# UpgradeDetector


def test_transparent_proxy_with_delegatecall(simple_proxy):
    findings = UpgradeDetector().detect(parse(simple_proxy))

    assert types_of(findings) == [RiskType.DELEGATECALL_USAGE, RiskType.TRANSPARENT_PROXY]
    delegatecall, transparent = findings
    assert delegatecall.line_number == 13
    assert delegatecall.function_name == "fallback"
    assert "implementation.delegatecall(msg.data)" in delegatecall.code_snippet
    assert transparent.function_name == "upgradeTo"
    assert transparent.line_number == 7


def test_uups_proxy(uups_vault):
    findings = UpgradeDetector().detect(parse(uups_vault))

    assert types_of(findings) == [RiskType.UUPS_PROXY]
    assert findings[0].function_name == "_authorizeUpgrade"
    assert findings[0].line_number == 4


def test_uups_by_inheritance_only():
    findings = UpgradeDetector().detect(parse("contract A is UUPSUpgradeable {\n}"))

    assert types_of(findings) == [RiskType.UUPS_PROXY]
    assert findings[0].line_number == 1


def test_transparent_by_inheritance_only():
    findings = UpgradeDetector().detect(parse("contract P is TransparentUpgradeableProxy {\n}"))

    assert types_of(findings) == [RiskType.TRANSPARENT_PROXY]
    assert findings[0].line_number == 1
    assert findings[0].function_name == "Transparent proxy"


def test_transparent_through_receive_delegatecall():
    source = """contract P {
    address impl;

    receive() external payable {
        (bool ok, ) = impl.delegatecall("");
    }
}"""
    findings = UpgradeDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.DELEGATECALL_USAGE, RiskType.TRANSPARENT_PROXY]
    assert findings[0].function_name == "receive"
    assert findings[0].line_number == 5
    assert findings[1].line_number == 1


def test_delegatecall_reported_per_function():
    source = """contract A {
    function d(address impl) external {
        impl.delegatecall("");
    }

    function e(address impl) external {
        impl.delegatecall("");
    }
}"""
    findings = UpgradeDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.DELEGATECALL_USAGE, RiskType.DELEGATECALL_USAGE]
    assert [f.function_name for f in findings] == ["d", "e"]
    assert [f.line_number for f in findings] == [3, 7]


# DangerousFunctionsDetector


def test_selfdestruct(owner_selfdestruct):
    findings = DangerousFunctionsDetector().detect(parse(owner_selfdestruct))

    assert types_of(findings) == [RiskType.SELFDESTRUCT]
    assert findings[0].line_number == 12
    assert findings[0].function_name == "kill"


def test_tx_origin(tx_origin_contract):
    findings = DangerousFunctionsDetector().detect(parse(tx_origin_contract))

    assert types_of(findings) == [RiskType.TX_ORIGIN]
    assert findings[0].line_number == 7
    assert "require(tx.origin == owner);" in findings[0].code_snippet


def test_unchecked_call(unchecked_call):
    findings = DangerousFunctionsDetector().detect(parse(unchecked_call))

    assert types_of(findings) == [RiskType.UNCHECKED_CALL]
    assert findings[0].line_number == 5
    assert findings[0].function_name == "pay"


def test_checked_call_destructure(checked_call):
    assert DangerousFunctionsDetector().detect(parse(checked_call)) == []


def test_checked_call_on_following_line():
    source = """contract A {
    function pay(address payable to) external {
        bool success;
        (success, ) = to.call{value: 1}("");
        if (!success) {
            revert();
        }
    }
}"""
    assert DangerousFunctionsDetector().detect(parse(source)) == []


def test_selfdestruct_reported_once_at_first_function():
    source = """contract A {
    function a() external {
        selfdestruct(payable(msg.sender));
    }

    function b() external {
        selfdestruct(payable(owner));
    }
}"""
    findings = DangerousFunctionsDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.SELFDESTRUCT]
    assert findings[0].function_name == "a"
    assert findings[0].line_number == 3


def test_one_unchecked_call_finding_per_function():
    source = """contract A {
    function pay(address t) external {
        t.call("");
        t.call("x");
    }

    function refund(address t) external {
        t.call{value: 1}("");
    }
}"""
    findings = DangerousFunctionsDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.UNCHECKED_CALL, RiskType.UNCHECKED_CALL]
    assert [f.function_name for f in findings] == ["pay", "refund"]
    assert [f.line_number for f in findings] == [3, 8]


# EconomicDetector


def test_economic_levers(fee_token):
    findings = EconomicDetector().detect(parse(fee_token))

    assert types_of(findings) == [
        RiskType.ADJUSTABLE_FEES,
        RiskType.BLACKLIST_MODIFICATION,
        RiskType.WHITELIST_MODIFICATION,
        RiskType.MAX_TX_LIMIT,
    ]
    assert [f.function_name for f in findings] == [
        "setTaxFee",
        "addToBlacklist",
        "setWhitelist",
        "setMaxTxAmount",
    ]
    assert all(f.modifier_name == "onlyOwner" for f in findings)


def test_list_setter_without_list_variable():
    """A blacklist setter needs a blacklist variable to be flagged."""
    source = """contract A {
    function addToBlacklist(address account) external onlyOwner {
        emit Blacklisted(account);
    }
}"""
    assert EconomicDetector().detect(parse(source)) == []


@pytest.mark.parametrize("detector", default_detectors(), ids=lambda d: d.name)
def test_detectors_report_nothing_on_safe_token(detector, safe_token):
    assert detector.detect(parse(safe_token)) == []


@pytest.mark.parametrize("variable", ["maxTx", "maxTxAmount", "_maxTxAmount", "maxTransactionAmount"])
def test_max_tx_variable_names(variable):
    source = f"""contract A {{
    uint256 public {variable} = 100;

    function setMaxTxAmount(uint256 amount) external onlyOwner {{
        {variable} = amount;
    }}
}}"""
    findings = EconomicDetector().detect(parse(source))

    assert types_of(findings) == [RiskType.MAX_TX_LIMIT]
    assert findings[0].line_number == 4
