#!/usr/bin/env python3
"""Call every built-in tool once through a real MCP stdio session.

Usage:
    python scripts/demo_client.py
"""

import asyncio

from mcp_client.client import ToolServerClient


async def main():
    async with ToolServerClient() as client:
        print("Available tools:")
        for name in await client.list_tools():
            print(f" - {name}")
        print()

        print(f"echo      -> {await client.echo('Hello from the Inferenco MCP demo!')}")
        print(f"increment -> {await client.increment()}")
        print(f"increment -> {await client.increment()}")
        print(f"reverse   -> {await client.reverse('Inferenco MCP')}")
        print(f"clock     -> {await client.clock()}")
        print(f"dice(20)  -> {await client.dice(20)}")


if __name__ == "__main__":
    asyncio.run(main())
