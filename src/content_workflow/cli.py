"""Command-line interface for content-workflow."""

import argparse
import json
import logging
import sys
from pathlib import Path

from content_workflow.clients import ClientError, Credential, GitHubClient, TranslateClient
from content_workflow.config import load_config
from content_workflow.listing import count_by_category, list_previews
from content_workflow.mutation import MutationOrchestrator
from content_workflow.records import COLLECTIONS, get_collection, materialize_draft, serialize
from content_workflow.translation import TranslationBackfill
from schemas.draft import Draft
from schemas.outcome import MutationOutcome


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def _split_pair(value: str, sep: str, what: str) -> tuple[str, str]:
    left, found, right = value.partition(sep)
    if not found or not left or not right:
        raise ValueError(f"Expected {what}, got '{value}'")
    return left.strip().lower(), right


def _build_config(args: argparse.Namespace) -> dict:
    """Environment config with command-line overrides applied."""
    config = load_config()
    github = config["github"]
    for key in ("owner", "repo", "ref"):
        value = getattr(args, key, None)
        if value:
            github[key] = value
    if getattr(args, "api_url", None):
        github["base_url"] = args.api_url
    if getattr(args, "data_root", None):
        config["data_root"] = args.data_root
    if getattr(args, "translate_url", None):
        config["translate"] = {"base_url": args.translate_url}
    return config


def _open_gateway(config: dict) -> GitHubClient:
    credential = Credential.from_env()
    if not credential.is_usable:
        raise ValueError("GITHUB_TOKEN is not set")
    return GitHubClient(config["github"], credential)


def _read_draft(gateway: GitHubClient, collection, uid: str) -> Draft:
    logger = logging.getLogger(__name__)
    try:
        document = gateway.read_json(collection.index_path(uid))
    except ValueError as e:
        logger.warning(f"index.json for {uid} is not valid JSON; starting from empty variants ({e})")
        document = None
    if document is None:
        logger.info(f"No existing document for {uid}; editing a new record")
    return materialize_draft(document, collection, uid)


def _apply_edits(draft: Draft, args: argparse.Namespace) -> Draft:
    for item in args.set or []:
        key, value = _split_pair(item, "=", "LANG.FIELD=VALUE")
        language, field = _split_pair(key, ".", "LANG.FIELD=VALUE")
        draft = draft.with_field(language, field, value)

    for item in args.upload or []:
        language, path = _split_pair(item, ":", "LANG:PATH")
        path = Path(path)
        if not path.is_file():
            raise ValueError(f"Upload not found: {path}")
        draft = draft.with_uploads(language, [path])

    for item in args.remove_image or []:
        language, name = _split_pair(item, ":", "LANG:NAME")
        draft = draft.mark_image_removed(language, name)

    for item in args.hero or []:
        language, name = _split_pair(item, ":", "LANG:NAME")
        draft = draft.promote_hero(language, name)

    return draft


def _backfill(config: dict, draft: Draft) -> Draft:
    if config["translate"] is None:
        logging.getLogger(__name__).warning("LIBRE_TRANSLATE_URL is not set; skipping translation")
        return draft
    with TranslateClient(config["translate"]) as client:
        return TranslationBackfill(client).fill_missing(draft)


def _report(outcome: MutationOutcome) -> int:
    logger = logging.getLogger(__name__)
    if outcome.ok:
        logger.info(outcome.notice)
        logger.info(f"  Branch: {outcome.branch}")
        logger.info(f"  PR: {outcome.pr_url}")
        if not outcome.auto_merge:
            logger.warning("  Auto-merge was not enabled; merge the PR manually")
        return 0

    logger.error(f"Failed during {outcome.stage.value}: {outcome.error}")
    if outcome.status:
        logger.error(f"  Last status: {outcome.status}")
    if outcome.branch:
        logger.error(f"  Branch left in place: {outcome.branch}")
    return 1


def list_records(args: argparse.Namespace) -> int:
    """Execute the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = _build_config(args)
        collection = get_collection(args.collection, config["data_root"])
        with _open_gateway(config) as gateway:
            previews = list_previews(gateway, collection)

        for preview in previews:
            logger.info(
                f"{preview.uid}\t{preview.language or ''}\t{preview.category or ''}\t"
                f"{preview.title or preview.uid}"
            )
        counts = count_by_category(previews)
        summary = ", ".join(f"{name or '-'}: {n}" for name, n in sorted(counts.items()))
        logger.info(f"Total: {len(previews)}" + (f" ({summary})" if summary else ""))
        return 0

    except (ClientError, ValueError) as e:
        logger.error(f"Failed to list {args.collection}: {e}")
        return 1


def create_record(args: argparse.Namespace) -> int:
    """Execute the create command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = _build_config(args)
        collection = get_collection(args.collection, config["data_root"])
        with _open_gateway(config) as gateway:
            outcome = MutationOrchestrator(gateway, collection).create_new(args.uid)
        return _report(outcome)

    except ValueError as e:
        logger.error(f"Failed to create {args.uid}: {e}")
        return 1


def edit_record(args: argparse.Namespace) -> int:
    """Execute the edit command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = _build_config(args)
        collection = get_collection(args.collection, config["data_root"])
        with _open_gateway(config) as gateway:
            draft = _apply_edits(_read_draft(gateway, collection, args.uid), args)
            if args.translate_missing:
                draft = _backfill(config, draft)
            outcome = MutationOrchestrator(gateway, collection).save(draft)
        return _report(outcome)

    except (ClientError, KeyError, ValueError) as e:
        logger.error(f"Failed to edit {args.uid}: {e}")
        return 1


def delete_record(args: argparse.Namespace) -> int:
    """Execute the delete command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = _build_config(args)
        collection = get_collection(args.collection, config["data_root"])
        with _open_gateway(config) as gateway:
            outcome = MutationOrchestrator(gateway, collection).delete(args.uid)
        return _report(outcome)

    except ValueError as e:
        logger.error(f"Failed to delete {args.uid}: {e}")
        return 1


def translate_record(args: argparse.Namespace) -> int:
    """Execute the translate command: print the backfilled document without saving.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = _build_config(args)
        collection = get_collection(args.collection, config["data_root"])
        with _open_gateway(config) as gateway:
            draft = _read_draft(gateway, collection, args.uid)
        draft = _backfill(config, draft)
        print(json.dumps(serialize(draft), ensure_ascii=False, indent=2))
        return 0

    except (ClientError, ValueError) as e:
        logger.error(f"Failed to translate {args.uid}: {e}")
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="content-workflow",
        description="Edit multilingual site content through branches and auto-merged pull requests",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--collection",
        choices=sorted(COLLECTIONS),
        default="articles",
        help="Collection to operate on (default: articles)",
    )
    common.add_argument("--owner", help="Repository owner (default: $CONTENT_REPO_OWNER)")
    common.add_argument("--repo", help="Repository name (default: $CONTENT_REPO_NAME)")
    common.add_argument("--ref", help="Ref to read content from (default: $CONTENT_REF)")
    common.add_argument("--api-url", help="GitHub API base URL (default: $GITHUB_API_URL)")
    common.add_argument(
        "--data-root",
        help="Repository directory holding the collections (default: data)",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser(
        "list",
        parents=[common],
        help="List records with their display-language preview",
    )
    list_parser.set_defaults(func=list_records)

    create_parser = subparsers.add_parser(
        "create",
        parents=[common],
        help="Open a PR adding an empty record",
        description="Create a record with empty fields in every language on a new branch and open an auto-merge PR.",
    )
    create_parser.add_argument("--uid", required=True, help="Identifier of the new record")
    create_parser.set_defaults(func=create_record)

    edit_parser = subparsers.add_parser(
        "edit",
        parents=[common],
        help="Apply edits to a record and open a PR",
        description="Load a record, apply field, image and translation edits, and save them through a new branch and auto-merge PR.",
    )
    edit_parser.add_argument("--uid", required=True, help="Identifier of the record")
    edit_parser.add_argument(
        "--set",
        action="append",
        metavar="LANG.FIELD=VALUE",
        help="Set a field of one language (repeatable)",
    )
    edit_parser.add_argument(
        "--upload",
        action="append",
        metavar="LANG:PATH",
        help="Upload a local image and append it to a language (repeatable)",
    )
    edit_parser.add_argument(
        "--remove-image",
        action="append",
        metavar="LANG:NAME",
        help="Remove an image from the record (repeatable)",
    )
    edit_parser.add_argument(
        "--hero",
        action="append",
        metavar="LANG:NAME",
        help="Make an image the first (hero) image of a language",
    )
    edit_parser.add_argument(
        "--translate-missing",
        action="store_true",
        help="Translate empty languages before saving",
    )
    edit_parser.add_argument(
        "--translate-url",
        help="Translation endpoint (default: $LIBRE_TRANSLATE_URL)",
    )
    edit_parser.set_defaults(func=edit_record)

    delete_parser = subparsers.add_parser(
        "delete",
        parents=[common],
        help="Open a PR deleting a record and its images",
    )
    delete_parser.add_argument("--uid", required=True, help="Identifier of the record")
    delete_parser.set_defaults(func=delete_record)

    translate_parser = subparsers.add_parser(
        "translate",
        parents=[common],
        help="Print a record with empty languages translated, without saving",
    )
    translate_parser.add_argument("--uid", required=True, help="Identifier of the record")
    translate_parser.add_argument(
        "--translate-url",
        help="Translation endpoint (default: $LIBRE_TRANSLATE_URL)",
    )
    translate_parser.set_defaults(func=translate_record)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
