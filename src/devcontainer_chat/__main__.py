import asyncio
import sys

from dotenv import load_dotenv
from loguru import logger

from devcontainer_chat.app_config import load_json_config, parse_app_config, resolve_runtime_env
from devcontainer_chat.bootstrap import bootstrap_runtime
from devcontainer_chat.errors import ConfigurationError
from devcontainer_chat.repl import ChatRepl


async def main() -> None:
    load_dotenv()

    config = load_json_config()
    try:
        app = parse_app_config(config)
        env = resolve_runtime_env(app.provider_name, config)
        runtime = bootstrap_runtime(app, env)
    except ConfigurationError as ex:
        logger.error(str(ex))
        sys.exit(1)

    repl = ChatRepl(runtime.service, app.container_id)

    print("devcontainer-chat (type 'exit' to quit, '/help' for commands)")
    print(f"Provider: {app.provider_name} ({app.model})")
    print(f"Container: {app.container_id}")
    print(f"Project: {runtime.file_tree_source.project_dir(app.container_id)}")
    if runtime.log_descriptions:
        print(f"Logging: {', '.join(runtime.log_descriptions)}")
    print()

    try:
        while True:
            try:
                user_input = input("you> ")
            except (EOFError, KeyboardInterrupt):
                break

            trimmed = user_input.strip()

            if trimmed in ("exit", "quit"):
                break

            if not trimmed:
                continue

            try:
                await repl.handle(trimmed)
                print()
            except Exception as ex:
                logger.error(f"Unhandled error: {ex}")
                print(f"\nError: {ex}\n")
    finally:
        await runtime.service.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
