#!/usr/bin/env python3
"""Profile LenientHTML, stage by stage, on template-style markup.

    python profile_parser.py                       # built-in sample, full parse
    python profile_parser.py pages/ --stage scan   # only the scanner
    python profile_parser.py a.html --sort cumulative --limit 50
"""

import argparse
import cProfile
import pstats
from pathlib import Path

from lenienthtml import ExpressionExtractor, LenientHTML, Scanner, TreeBuilder
from lenienthtml.errors import ErrorCollector

SAMPLE = """
<!DOCTYPE html>
<html>
<head><title>{{ page.title }}</title><script>if (a < b) { run(); }</script></head>
<body class="{{ theme }}">
    <div class="container">
        <p>Paragraph {{ index + 1 }}</p>
        <p data-x='y'>Paragraph <b>2</p>
        <table>
            <tr><td>Cell 1</td><td>{{ cells[1] }}</td></tr>
            <tr><td>Cell 3<br>Cell 4</td></span></tr>
        </table>
        <!-- unclosed div below -->
        <div title="a"">{{ broken + }}
    </div>
</body>
</html>
"""


def collect_documents(paths):
    """Read every file given, descending into directories for .html files."""
    documents = []
    for path in paths:
        path = Path(path)
        files = sorted(path.rglob("*.html")) if path.is_dir() else [path]
        for file_path in files:
            documents.append((str(file_path), file_path.read_text(encoding="utf-8", errors="replace")))
    return documents


def scan_only(html):
    sink = ErrorCollector(html)
    tokens = list(Scanner(sink).scan(html))
    return len(tokens), len(sink.errors)


def scan_and_build(html):
    sink = ErrorCollector(html)
    tokens = list(Scanner(sink).scan(html))
    TreeBuilder(sink).build(tokens)
    return len(tokens), len(sink.errors)


def full_parse(html):
    sink = ErrorCollector(html)
    tokens = list(Scanner(sink).scan(html))
    root = TreeBuilder(sink).build(tokens)
    ExpressionExtractor(sink=sink).annotate(root)
    root.freeze()
    return len(tokens), len(sink.errors)


STAGES = {"scan": scan_only, "build": scan_and_build, "full": full_parse}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Profile LenientHTML on a set of documents.")
    parser.add_argument("paths", nargs="*", help="HTML files or directories (default: built-in sample)")
    parser.add_argument("--stage", choices=sorted(STAGES), default="full", help="how far to run the pipeline")
    parser.add_argument("--repeat", type=int, default=10, help="passes over the documents (default: 10)")
    parser.add_argument("--sort", choices=["cumulative", "tottime"], default="tottime")
    parser.add_argument("--limit", type=int, default=30, help="number of functions to print")
    args = parser.parse_args(argv)

    if args.paths:
        documents = collect_documents(args.paths)
    else:
        documents = [("<sample>", SAMPLE * 100)]
    if not documents:
        print("No documents found.")
        return 1

    total_chars = sum(len(html) for _, html in documents)
    print(f"Loaded {len(documents)} documents ({total_chars} characters), stage={args.stage}.")

    # Warm up once outside the profiler so first-call compilation is not counted
    for name, html in documents:
        LenientHTML(html, source_name=name)

    run = STAGES[args.stage]
    token_count = 0
    error_count = 0
    profiler = cProfile.Profile()
    profiler.enable()
    for _ in range(args.repeat):
        for _, html in documents:
            tokens, errors = run(html)
            token_count += tokens
            error_count += errors
    profiler.disable()

    print(f"{token_count} tokens and {error_count} errors over {args.repeat} passes.")
    stats = pstats.Stats(profiler)
    stats.sort_stats(args.sort)
    stats.print_stats(args.limit)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
