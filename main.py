import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def build_agent(args, auto_index: bool = True):
    """CLI 옵션으로 에이전트 생성 + 초기화"""
    from searcher import AgentOptions, SearchAgent

    options = AgentOptions(
        auto_index=auto_index,
        max_index_size=args.max_index_size,
        enable_summarization=not args.no_summary,
        enable_query_enhancement=not args.no_enhance,
        use_backend=args.backend,
    )
    agent = SearchAgent.from_env(options=options, data_dir=args.data_dir)
    agent.initialize()
    return agent


def print_results(response):
    """검색 결과 출력"""
    print(f"\n검색 결과: {response.total}개\n")
    for i, hit in enumerate(response.results, 1):
        print(f"[{i}] {hit.highlighted_title or hit.title}")
        print(f"    유형: {hit.type}, 날짜: {hit.date or '-'}")
        print(f"    점수: {hit.combined_score:.3f} (키워드 {hit.lexical_score:.3f}, 시맨틱 {hit.semantic_score:.3f})")
        if hit.summary:
            print(f"    요약: {hit.summary}")
        elif hit.highlighted_content:
            print(f"    내용: {hit.highlighted_content}")
        if hit.url:
            print(f"    링크: {hit.url}")
        print()


def print_stats(stats: dict):
    """인덱스 통계 출력"""
    print("\n=== 통계 ===")
    print(f"초기화: {stats['initialized']}")
    if "index" in stats:
        index = stats["index"]
        print(f"인덱싱된 문서: {index['total_indexed']}개 (임베딩 {index['with_embeddings']}개)")
        print(f"메모리 추정: {index['memory_usage']}")
    for table in stats.get("available_tables", []):
        print(f"  {table['table']}: {table['count']}개")


def cmd_index(args):
    """인덱싱 실행"""
    with build_agent(args, auto_index=False) as agent:
        report = agent.build_index()
        print(f"인덱싱 완료: {report.indexed}/{report.total}개")
        if report.failed_ids:
            print(f"실패: {len(report.failed_ids)}개 ({', '.join(map(str, report.failed_ids[:10]))})")
        print_stats(agent.get_stats())


def cmd_search(args):
    """검색 실행"""
    with build_agent(args) as agent:
        response = agent.search(args.query, limit=args.limit, tables=args.tables)
        print_results(response)


def cmd_interactive(args):
    """대화형 검색 ('exit'로 종료)"""
    from searcher import SearchError

    with build_agent(args) as agent:
        print("검색어를 입력하세요 ('exit' 입력 시 종료)")
        while True:
            try:
                query = input("\n검색> ").strip()
            except (EOFError, KeyboardInterrupt):
                print()
                break

            if query.lower() in ("exit", "quit"):
                break
            if not query:
                continue

            try:
                print_results(agent.search(query, limit=args.limit))
            except SearchError as e:
                print(f"⚠️  {e}")

        print_stats(agent.get_stats())


def cmd_suggest(args):
    """검색어 제안"""
    with build_agent(args, auto_index=False) as agent:
        suggestions = agent.suggest_search_terms(args.partial, limit=args.limit)
        if not suggestions:
            print("제안할 검색어가 없습니다. (2글자 이상 입력)")
        for term in suggestions:
            print(f"- {term}")


def cmd_related(args):
    """관련 게시물"""
    with build_agent(args) as agent:
        hits = agent.get_related_posts(args.post_id, limit=args.limit)
        print(f"\n게시물 {args.post_id}의 관련 게시물: {len(hits)}개\n")
        for i, hit in enumerate(hits, 1):
            print(f"[{i}] {hit.title} ({hit.combined_score:.3f})")
            if hit.url:
                print(f"    링크: {hit.url}")


def cmd_serve(args):
    """API 서버 실행"""
    import uvicorn

    from api import create_app
    from searcher import AgentOptions

    options = AgentOptions(
        max_index_size=args.max_index_size,
        enable_summarization=not args.no_summary,
        enable_query_enhancement=not args.no_enhance,
        use_backend=args.backend,
    )
    app = create_app(options=options, data_dir=args.data_dir)
    uvicorn.run(app, host=args.host, port=args.port)


def main():
    from logging_config import setup_logging

    parser = argparse.ArgumentParser(description="미얀마어 WordPress 검색 엔진")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path("data"),
        help="데이터 저장 디렉토리 (Chroma 백엔드)",
    )
    parser.add_argument(
        "--backend",
        action="store_true",
        help="인메모리 인덱스 대신 Chroma 백엔드 사용",
    )
    parser.add_argument(
        "--max-index-size",
        type=int,
        default=1000,
        help="인덱싱할 최대 게시물 수",
    )
    parser.add_argument(
        "--no-enhance",
        action="store_true",
        help="LLM 쿼리 확장 생략",
    )
    parser.add_argument(
        "--no-summary",
        action="store_true",
        help="LLM 요약 생략",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="콘솔에 INFO 로그 출력",
    )

    subparsers = parser.add_subparsers(dest="command", help="실행할 명령")

    # index 명령
    subparsers.add_parser("index", help="게시물 인덱싱")

    # search 명령
    search_parser = subparsers.add_parser("search", help="게시물 검색")
    search_parser.add_argument(
        "query",
        type=str,
        help="검색어",
    )
    search_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="결과 수",
    )
    search_parser.add_argument(
        "--tables",
        nargs="*",
        default=None,
        help="검색할 테이블 (백엔드 사용 시)",
    )

    # interactive 명령
    interactive_parser = subparsers.add_parser("interactive", help="대화형 검색")
    interactive_parser.add_argument(
        "--limit",
        type=int,
        default=5,
        help="결과 수",
    )

    # suggest 명령
    suggest_parser = subparsers.add_parser("suggest", help="검색어 제안")
    suggest_parser.add_argument(
        "partial",
        type=str,
        help="입력 중인 검색어",
    )
    suggest_parser.add_argument(
        "--limit",
        type=int,
        default=5,
        help="제안 수",
    )

    # related 명령
    related_parser = subparsers.add_parser("related", help="관련 게시물")
    related_parser.add_argument(
        "post_id",
        type=int,
        help="게시물 ID",
    )
    related_parser.add_argument(
        "--limit",
        type=int,
        default=5,
        help="결과 수",
    )

    # serve 명령
    serve_parser = subparsers.add_parser("serve", help="API 서버 실행")
    serve_parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="호스트 주소",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="포트 번호",
    )

    args = parser.parse_args()

    setup_logging(console_level=logging.INFO if args.verbose else logging.WARNING)

    if args.command == "index":
        cmd_index(args)
    elif args.command == "search":
        cmd_search(args)
    elif args.command == "interactive":
        cmd_interactive(args)
    elif args.command == "suggest":
        cmd_suggest(args)
    elif args.command == "related":
        cmd_related(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
