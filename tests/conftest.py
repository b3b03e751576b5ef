"""Shared fixtures: sample contracts covering each detector."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """CLI tests point structlog at a captured stream; restore defaults after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def safe_token():
    """Plain token with no privileged functions."""
    return """pragma solidity ^0.8.20;

contract SafeToken {
    mapping(address => uint256) private _balances;
    uint256 private _totalSupply;

    function balanceOf(address account) public view returns (uint256) {
        return _balances[account];
    }

    function transfer(address to, uint256 amount) public returns (bool) {
        _balances[msg.sender] -= amount;
        _balances[to] += amount;
        return true;
    }
}
"""


@pytest.fixture
def unlimited_mint():
    """Public mint with no cap and no supply check."""
    return """pragma solidity ^0.8.0;

contract InflatableToken {
    mapping(address => uint256) public balances;

    function mint(address to, uint256 amount) public {
        balances[to] += amount;
    }
}
"""


@pytest.fixture
def capped_owner_mint():
    """Owner-only mint bounded by a MAX_SUPPLY constant."""
    return """pragma solidity ^0.8.0;

contract CappedToken {
    uint256 public constant MAX_SUPPLY = 1000000;
    address public owner;

    modifier onlyOwner() {
        require(msg.sender == owner);
        _;
    }

    function mint(address to, uint256 amount) external onlyOwner {
        _mint(to, amount);
    }
}
"""


@pytest.fixture
def owner_selfdestruct():
    """Owner-gated selfdestruct."""
    return """pragma solidity ^0.8.0;

contract Killable {
    address public owner;

    modifier onlyOwner() {
        require(msg.sender == owner);
        _;
    }

    function kill() public onlyOwner {
        selfdestruct(payable(owner));
    }
}
"""


@pytest.fixture
def centralized_contract():
    """Three owner-gated setters and nothing else."""
    return """pragma solidity ^0.8.0;

contract Controlled {
    address public owner;
    uint256 public limit;
    bool public active;

    modifier onlyOwner() {
        require(msg.sender == owner, "not owner");
        _;
    }

    function setLimit(uint256 value) external onlyOwner {
        limit = value;
    }

    function setActive(bool value) external onlyOwner {
        active = value;
    }

    function setOwner(address value) external onlyOwner {
        owner = value;
    }
}
"""


@pytest.fixture
def checked_call():
    """Low-level call whose success flag is required."""
    return """pragma solidity ^0.8.0;

contract Payout {
    function pay(address payable to, uint256 amount) external {
        (bool success, ) = to.call{value: amount}("");
        require(success, "transfer failed");
    }
}
"""


@pytest.fixture
def unchecked_call():
    """Low-level call whose result is discarded."""
    return """pragma solidity ^0.8.0;

contract Payout {
    function pay(address payable to, uint256 amount) external {
        to.call{value: amount}("");
    }
}
"""


@pytest.fixture
def tx_origin_contract():
    """Authorization through tx.origin."""
    return """pragma solidity ^0.8.0;

contract Phishable {
    address public owner;

    function transferTo(address payable to, uint256 amount) public {
        require(tx.origin == owner);
        to.transfer(amount);
    }
}
"""


@pytest.fixture
def treasury_contract():
    """Owner withdrawal, emergency exit and direct balance writes."""
    return """pragma solidity ^0.8.0;

contract Treasury {
    address public owner;
    mapping(address => uint256) public balances;

    modifier onlyOwner() {
        require(msg.sender == owner);
        _;
    }

    function withdraw(uint256 amount) external onlyOwner {
        payable(owner).transfer(amount);
    }

    function emergencyExit() external onlyOwner {
        payable(owner).transfer(address(this).balance);
    }

    function setBalance(address account, uint256 amount) external onlyOwner {
        balances[account] = amount;
    }
}
"""


@pytest.fixture
def pausable_token():
    """Pausable token with single-step ownership transfer."""
    return """pragma solidity ^0.8.0;

contract PausableToken is ERC20, Pausable, Ownable {
    function pause() external onlyOwner {
        _pause();
    }

    function unpause() external onlyOwner {
        _unpause();
    }

    function transferOwnership(address newOwner) public override onlyOwner {
        _transferOwnership(newOwner);
    }
}
"""


@pytest.fixture
def simple_proxy():
    """Hand-rolled proxy delegating from its fallback."""
    return """pragma solidity ^0.8.0;

contract SimpleProxy {
    address public implementation;
    address public admin;

    function upgradeTo(address newImplementation) external {
        require(msg.sender == admin);
        implementation = newImplementation;
    }

    fallback() external payable {
        (bool success, ) = implementation.delegatecall(msg.data);
        require(success);
    }
}
"""


@pytest.fixture
def uups_vault():
    """UUPS upgradeable contract."""
    return """pragma solidity ^0.8.0;

contract Vault is Initializable, UUPSUpgradeable, OwnableUpgradeable {
    function _authorizeUpgrade(address newImplementation) internal override onlyOwner {}
}
"""


@pytest.fixture
def fee_token():
    """Owner-adjustable fees, lists and transaction limit."""
    return """pragma solidity ^0.8.0;

contract FeeToken {
    address public owner;
    uint256 public taxFee = 5;
    uint256 public maxTxAmount = 1000;
    mapping(address => bool) public isBlacklisted;
    mapping(address => bool) private _whitelist;

    modifier onlyOwner() {
        require(msg.sender == owner);
        _;
    }

    function setTaxFee(uint256 fee) external onlyOwner {
        taxFee = fee;
    }

    function addToBlacklist(address account) external onlyOwner {
        isBlacklisted[account] = true;
    }

    function setWhitelist(address account, bool allowed) external onlyOwner {
        _whitelist[account] = allowed;
    }

    function setMaxTxAmount(uint256 amount) external onlyOwner {
        maxTxAmount = amount;
    }
}
"""
