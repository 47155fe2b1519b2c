"""Demo and validation modes: spawn the server over stdio, call sample searches, print results."""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Any, Protocol

from src.contracts.products_v1 import validate_search_payload
from src.core.config import config
from src.mcp.client import MCPClient

DEMO_CALLS: list[tuple[str, str, dict[str, Any]]] = [
    ("Search for medical syringes", "products.vectorSearch", {"query": "seringa médica", "limit": 3}),
    ("Search for computer equipment", "products.vectorSearch", {"query": "equipamento informática", "limit": 3}),
    ("Search for cleaning products", "products.search", {"query": "limpeza", "limit": 3}),
]

VALIDATION_CALLS: list[tuple[str, dict[str, Any]]] = [
    ("products.search", {"query": "seringa 5ml", "limit": 5}),
    ("products.vectorSearch", {"query": "seringa 5ml", "limit": 5, "threshold": 0.7}),
    ("products.vectorSearch", {"query": "computador notebook", "limit": 3}),
]


class ToolCaller(Protocol):
    async def call_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]: ...

    async def close(self) -> None: ...


def spawn_server_client() -> MCPClient:
    return MCPClient(
        sys.executable,
        ["-m", "src.main", "serve"],
        env=dict(os.environ),
        cwd=str(config.project_root),
    )


def format_products(payload: dict[str, Any], max_items: int = 3) -> list[str]:
    lines: list[str] = []
    for i, product in enumerate((payload.get("products") or [])[:max_items]):
        lines.append(f"  {i + 1}. {product.get('name')} (Code: {product.get('code')})")
        lines.append(
            f"     Unit: {product.get('unit')}, Price: R$ {product.get('estimatedPrice')}"
        )
        similarity = product.get("similarity")
        if similarity:
            lines.append(f"     Similarity: {similarity * 100:.1f}%")
    return lines


async def run_demo(client: ToolCaller | None = None) -> int:
    client = client or spawn_server_client()
    print(f"{config.mcp_server_name} demo\n")
    failures = 0
    try:
        for title, tool, args in DEMO_CALLS:
            print(f"\n📋 {title}")
            print("─" * 50)
            payload = await client.call_tool(tool, args)
            if not payload.get("success"):
                failures += 1
                print(f"❌ {payload.get('error', 'search failed')}")
                continue
            print(f"✅ Found {payload.get('totalFound', 0)} products")
            for line in format_products(payload):
                print(line)
    finally:
        await client.close()
    return 1 if failures == len(DEMO_CALLS) else 0


async def run_validate(client: ToolCaller | None = None) -> int:
    client = client or spawn_server_client()
    invalid = 0
    try:
        for tool, args in VALIDATION_CALLS:
            print(f"\n🧪 {tool} {args}")
            payload = await client.call_tool(tool, args)
            errors = validate_search_payload(payload)
            if not errors and not payload.get("success"):
                errors = [f"Search failed: {payload.get('error')}"]
            if errors:
                invalid += 1
                print("❌ Response format validation failed:")
                for error in errors:
                    print(f"  - {error}")
                continue
            print(f"✅ Response format is valid  ({payload.get('totalFound', 0)} found)")
            for line in format_products(payload):
                print(line)
    finally:
        await client.close()
    print("\n✅ All validations passed" if not invalid else f"\n❌ {invalid} validation(s) failed")
    return 1 if invalid else 0


def main(mode: str) -> int:
    runner = run_validate if mode == "validate" else run_demo
    return asyncio.run(runner())
