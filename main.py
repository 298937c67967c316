#!/usr/bin/env python3
"""
# AI Clone terminal chat

Ask questions about generative AI, RAG, prompt engineering and related
topics.  Answers are grounded in a small built-in knowledge base, and the
conversation is kept in a shared log that every running client sees.

Usage: ``python main.py [config.yaml]``
"""

import asyncio
import logging
import sys

from rag_conversation import LogError, build_controller
from rag_conversation.models import Sender
from rag_conversation.session import SessionProvider


def render_snapshot(entries, seen):
    """Print entries that have not been shown yet."""
    for entry in entries:
        if entry.id in seen:
            continue
        seen.add(entry.id)
        who = f"You ({entry.author_id[:8]}...)" if entry.sender is Sender.USER else "AI Clone"
        print(f"\n[{entry.timestamp:%H:%M:%S}] {who}: {entry.text}")


async def run(config_path=None):
    sessions = SessionProvider()
    controller = await build_controller(config_path, sessions=sessions)
    session = await sessions.sign_in()
    print(f"\nAI Clone Chatbot  (your user id: {session.id})")
    print("Ask me about Generative AI, RAG, Vector Databases, or Llama 3. Type 'exit' to quit.")

    seen = set()
    unsubscribe = controller.log.subscribe(
        lambda entries: render_snapshot(entries, seen),
        on_error=lambda error: print(f"\n(log error: {error})"),
    )
    try:
        while True:
            user_input = await asyncio.to_thread(input, "\n> ")
            if user_input.strip().lower() == "exit":
                print("\nGoodbye!")
                break
            try:
                await controller.submit(user_input)
            except LogError as exc:
                print(f"\n(message not sent: {exc})")
    finally:
        unsubscribe()
        await controller.aclose()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        asyncio.run(run(sys.argv[1] if len(sys.argv) > 1 else None))
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye!")
