import argparse
import dataclasses
import json
import logging
import sys

from core.app_context import AppContext
from core.config_loader import load_config
from core.errors import MatchingError
from database.database import configure_database
from database.init_db import init_db
from database.uow import matching_uow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _to_json(value) -> str:
    def default(obj):
        if dataclasses.is_dataclass(obj):
            return dataclasses.asdict(obj)
        if isinstance(obj, frozenset):
            return sorted(obj)
        raise TypeError(f"Not serializable: {type(obj).__name__}")
    return json.dumps(value, default=default, ensure_ascii=False, indent=2)


def run_posting_match(context: AppContext, posting_id: str, limit: int):
    with matching_uow() as repos:
        service = context.matching_service(repos)
        return service.find_matching_models(posting_id, limit)


def run_batch_match(context: AppContext, posting_ids, limit: int):
    """Match the given postings, or every active casting when none are given."""
    with matching_uow() as repos:
        if not posting_ids:
            posting_ids = repos.castings.list_active_ids()
            logger.info(f"Batch matching {len(posting_ids)} active castings")
        service = context.matching_service(repos)
        return service.batch_match_models(posting_ids, limit)


def run_similar(context: AppContext, candidate_id: str, limit: int):
    with matching_uow() as repos:
        service = context.matching_service(repos)
        return service.find_similar_models(candidate_id, limit)


def run_compatibility(context: AppContext, candidate_id: str, posting_id: str):
    with matching_uow() as repos:
        service = context.matching_service(repos)
        return service.get_model_compatibility(candidate_id, posting_id)


def main():
    parser = argparse.ArgumentParser(description="CastMatch Matching Driver")
    parser.add_argument('--mode', type=str, choices=['match', 'batch', 'similar', 'compat', 'weights'],
                        default='batch', help='Operation to run (default: batch over active castings)')
    parser.add_argument('--posting', action='append', default=[], help='Casting id (repeatable for batch)')
    parser.add_argument('--candidate', type=str, help='Model profile id')
    parser.add_argument('--limit', type=int, default=10)
    parser.add_argument('--config', type=str, default='config.yaml')
    args = parser.parse_args()

    config = load_config(args.config)
    configure_database(config.database.url)
    init_db()
    context = AppContext.build(config)

    try:
        if args.mode == 'match':
            if not args.posting:
                parser.error("--posting is required for match mode")
            result = run_posting_match(context, args.posting[0], args.limit)
        elif args.mode == 'batch':
            result = run_batch_match(context, args.posting, args.limit)
        elif args.mode == 'similar':
            if not args.candidate:
                parser.error("--candidate is required for similar mode")
            result = run_similar(context, args.candidate, args.limit)
        elif args.mode == 'compat':
            if not args.candidate or not args.posting:
                parser.error("--candidate and --posting are required for compat mode")
            result = run_compatibility(context, args.candidate, args.posting[0])
        else:
            result = context.weight_manager.get_weights().model_dump()
    except MatchingError as e:
        logger.error(f"{args.mode} failed [{e.code}]: {e}")
        sys.exit(1)
    finally:
        context.shutdown()

    print(_to_json(result))


if __name__ == "__main__":
    main()
