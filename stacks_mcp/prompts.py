"""Fixed prompt catalog served verbatim over MCP."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List


class UnknownPromptError(LookupError):
    """Raised when a prompt name is not in the catalog."""


@dataclass(frozen=True, slots=True)
class Prompt:
    name: str
    description: str
    text: str


STACKS_OVERVIEW = """This Stacks MCP Server provides the following blockchain capabilities:

## Account Management
- Generate new Stacks private keys (address derivation is not performed)
- Check STX balances and account information
- Support for mainnet, testnet, and mocknet

## Network Information
- Get network status and blockchain info
- Query block information by height or hash
- Access network-specific configurations

## Transaction Queries
- Query transaction status and details by transaction ID
- Search transactions by address
- Get transaction history

## Smart Contract Interactions
- Call read-only functions on smart contracts without fees
- Query contract state and public data
- Support for function arguments and custom sender addresses

## Getting Started
1. Use 'generate_account' to create a new private key
2. Use 'get_account_balance' to check balances
3. Use 'get_network_status' to check network health
4. Use 'call_read_only_function' to interact with smart contracts
5. Use 'search_transactions' to find transaction history
6. Use 'check_api_status' to verify your Hiro API key and rate limits

All operations support multiple networks (mainnet/testnet/mocknet) and provide detailed JSON responses.

Note: This server only queries blockchain data and calls read-only contract functions. \
It does not create, sign, or broadcast transactions."""

GETTING_STARTED_GUIDE = """## Getting Started with Stacks MCP Server

### 1. Check Network Status
Start by checking if the network is healthy:
```
get_network_status(network: "testnet")
```

### 2. Generate an Account Key
Create a new private key for testing:
```
generate_account(network: "testnet")
```

### 3. Fund Your Account
- For testnet: Use the Stacks testnet faucet
- Visit: https://explorer.hiro.so/sandbox/faucet
- Enter your testnet address to receive test STX

### 4. Check Your Balance
```
get_account_balance(address: "your_address", network: "testnet")
```

### 5. Call Smart Contract Functions
```
call_read_only_function(
  contractAddress: "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7",
  contractName: "my-contract",
  functionName: "get-balance",
  functionArgs: ["0x0516..."],
  network: "testnet"
)
```

### 6. Explore Blockchain Data
- View blocks: `get_block_info(blockId: "123", network: "testnet")`
- Search transactions: `search_transactions(address: "your_address", network: "testnet")`

### Important Notes
- Always use testnet for development and testing
- Keep private keys secure and never share them
- Read-only functions can be called without fees or transactions
- Function arguments must be hex-encoded Clarity values
- Set HIRO_API_KEY for higher rate limits"""

PROMPTS: Dict[str, Prompt] = {
    prompt.name: prompt
    for prompt in (
        Prompt(
            name="stacks_overview",
            description="Get an overview of Stacks blockchain capabilities available through this MCP server",
            text=STACKS_OVERVIEW,
        ),
        Prompt(
            name="getting_started_guide",
            description="Get a guide on how to start using Stacks blockchain features",
            text=GETTING_STARTED_GUIDE,
        ),
    )
}


def list_prompts() -> List[Dict[str, str]]:
    return [{"name": prompt.name, "description": prompt.description} for prompt in PROMPTS.values()]


def get_prompt(name: str) -> Dict[str, Any]:
    prompt = PROMPTS.get(name)
    if prompt is None:
        raise UnknownPromptError(f"Unknown prompt: {name}")
    return {
        "description": prompt.description,
        "messages": [
            {
                "role": "user",
                "content": {"type": "text", "text": prompt.text},
            }
        ],
    }
