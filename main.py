import asyncio
import json
import sys

from services.intent_reconciler import interpret_message


async def main(text: str):
    intent = await interpret_message(text)
    print(json.dumps(intent.to_wire(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    if sys.platform.startswith("win"):
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    user_text = " ".join(sys.argv[1:]) or "paguei 50 reais de almoço amanhã às 13h"
    asyncio.run(main(user_text))
