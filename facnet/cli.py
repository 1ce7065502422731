"""
facnet CLI - explore faculty expertise from the terminal.
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from .core.config import FacnetConfig, StoreConfig, ConfigurationError
from .core.resilience import CollaboratorUnavailable, setup_logging
from .providers.rest import RestStoreProvider
from .providers.snapshot import SnapshotProvider
from .scoring.relevance import normalize_selection
from .scoring.search import FacultySearch, SearchFilters, SearchSummary
from .session import ExplorerSession
from .visualization.exporter import GraphExporter

logger = logging.getLogger("facnet.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="facnet",
        description="Faculty expertise explorer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
data source:
  --snapshot FILE     JSON or CSV roster export
  (default)           REST store from FACNET_DB_ENDPOINT / FACNET_API_TOKEN

examples:
  facnet --snapshot roster.json topics
  facnet --snapshot roster.json search climate energy
  facnet search climate water --remote
  facnet --snapshot roster.json network cluster water --output water.graphml
  facnet network ego alice@example.edu --threshold 3
        """
    )

    parser.add_argument(
        "--snapshot",
        type=str,
        help="read the roster from a snapshot file instead of the store"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="print machine-readable JSON"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="verbose output"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("topics", help="list topics with faculty counts")

    search = commands.add_parser("search", help="rank faculty by topic relevance")
    search.add_argument("topics", nargs="+", help="topic keys (up to 3)")
    search.add_argument("--min-relevance", type=float, default=None)
    search.add_argument("--school", type=str, default=None)
    search.add_argument("--rank", type=str, default=None)
    search.add_argument("--term", type=str, default=None, help="name/department filter")
    search.add_argument("--limit", type=int, default=20, help="rows to print")
    search.add_argument(
        "--remote",
        action="store_true",
        help="let the store pick candidates instead of loading the whole roster"
    )

    commands.add_parser("relationships", help="tiered topic relationships")
    commands.add_parser("stats", help="per-topic score distribution")

    network = commands.add_parser("network", help="build a network view")
    network.add_argument("level", choices=["topic", "cluster", "ego"])
    network.add_argument("target", nargs="?", help="topic key (cluster) or email (ego)")
    network.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="minimum expertise for network membership (default: 2)"
    )
    network.add_argument(
        "--output", "-o",
        type=str,
        help="write the network to FILE (.json or .graphml)"
    )

    return parser


def create_provider(args):
    if args.snapshot:
        return SnapshotProvider(args.snapshot)
    return RestStoreProvider(StoreConfig.from_env())


def emit(payload):
    print(json.dumps(payload, indent=2))


def cmd_topics(session: ExplorerSession, args) -> int:
    counts = session.topic_counts()
    if args.json:
        emit([
            {**topic.to_dict(), "faculty_count": counts.get(topic.topic_key)}
            for topic in session.topics
        ])
        return 0

    print(f"{'topic':<16} {'category':<14} {'faculty':>7}  coverage")
    for topic in session.topics:
        key = topic.topic_key
        print(f"{key:<16} {topic.category.value:<14} {counts.get(key):>7}  {counts.coverage(key).value}")
    return 0


def search_filters(args):
    if args.school or args.rank or args.term:
        return SearchFilters(school=args.school, rank=args.rank, search_term=args.term)
    return None


def cmd_search(session: ExplorerSession, args) -> int:
    results = session.search(args.topics, filters=search_filters(args), min_relevance=args.min_relevance)
    return print_search(results, args)


def cmd_remote_search(provider, config: FacnetConfig, args) -> int:
    """rank the store's OR-filtered candidates; the full roster is never fetched."""
    if not isinstance(provider, RestStoreProvider):
        print("error: --remote needs the REST store, not a snapshot", file=sys.stderr)
        return 2

    topics = normalize_selection(args.topics, config.search.max_selected_topics)
    try:
        candidates = provider.fetch_faculty_matching(topics, config.search.max_results)
    except CollaboratorUnavailable as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    results = FacultySearch(config.search).search(
        candidates, topics, filters=search_filters(args), min_relevance=args.min_relevance
    )
    return print_search(results, args)


def print_search(results, args) -> int:
    summary = SearchSummary.from_results(results)

    if args.json:
        emit({
            "summary": asdict(summary),
            "results": [r.to_dict() for r in results],
        })
        return 0

    print(f"{summary.total} faculty, {summary.interdisciplinary} interdisciplinary, "
          f"avg match {summary.average_match_percent}%")
    for r in results[:args.limit]:
        matches = ", ".join(f"{m.topic}={m.score}" for m in r.topic_matches if m.score > 0)
        print(f"  {r.relevance_score:5.2f}  {r.full_name:<28} {r.email:<32} {matches}")
    if len(results) > args.limit:
        print(f"  ... {len(results) - args.limit} more")
    return 0


def cmd_relationships(session: ExplorerSession, args) -> int:
    relationships = session.relationships()
    if args.json:
        emit([r.to_dict() for r in relationships])
        return 0

    for r in relationships:
        scope = "same" if r.same_category else "cross"
        print(f"  {r.source:<14} {r.target:<14} {r.tier.value:<7} shared={r.shared_faculty:<3} "
              f"strength={r.strength:.2f} ({scope})")
    print(f"{len(relationships)} relationships")
    return 0


def cmd_stats(session: ExplorerSession, args) -> int:
    stats = session.topic_stats()
    if args.json:
        emit([s.to_dict() for s in stats])
        return 0

    print(f"{'topic':<16} {'faculty':>7} {'high':>5} {'mean':>5} {'max':>4}")
    for s in stats:
        print(f"{s.topic_key:<16} {s.faculty_count:>7} {s.high_count:>5} {s.mean_score:>5.2f} {s.max_score:>4}")
    return 0


def cmd_network(session: ExplorerSession, args, parser) -> int:
    processor = session.processor(args.threshold)

    if args.level == "topic":
        data = processor.generate_topic_network()
    elif not args.target:
        parser.error(f"network {args.level} requires a target")
    elif args.level == "cluster":
        data = processor.generate_faculty_cluster_network(args.target)
    else:
        data = processor.generate_faculty_ego_network(args.target.lower())

    exporter = GraphExporter()

    if args.output:
        path = Path(args.output)
        if path.suffix.lower() == ".graphml":
            exporter.to_graphml(data, str(path))
        else:
            exporter.to_json(data, str(path))

    if args.json:
        emit(exporter.to_json(data))
        return 0

    summary = exporter.summarize(data)
    print(f"Nodes: {summary.node_count}")
    print(f"Edges: {summary.edge_count} (total weight {summary.total_weight})")
    if summary.most_connected:
        print(f"Most connected: {', '.join(summary.most_connected)}")
    for i, community in enumerate(summary.communities, 1):
        print(f"Community {i}: {', '.join(community)}")
    if args.output:
        print(f"Written: {args.output}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # setup logging
    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        provider = create_provider(args)
    except ConfigurationError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        print("use --snapshot FILE or set the store environment variables", file=sys.stderr)
        return 2

    config = FacnetConfig.default()
    config.verbose = args.verbose

    if args.command == "search" and args.remote:
        try:
            return cmd_remote_search(provider, config, args)
        finally:
            provider.close()

    session = ExplorerSession(provider, config)

    try:
        session.load()
        if not session.is_ready:
            print(f"error: {session.error}", file=sys.stderr)
            return 1

        logger.debug(f"[cli] running {args.command}")
        if args.command == "topics":
            return cmd_topics(session, args)
        if args.command == "search":
            return cmd_search(session, args)
        if args.command == "relationships":
            return cmd_relationships(session, args)
        if args.command == "stats":
            return cmd_stats(session, args)
        return cmd_network(session, args, parser)
    finally:
        session.close()


if __name__ == "__main__":
    sys.exit(main())
