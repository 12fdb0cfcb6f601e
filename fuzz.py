#!/usr/bin/env python3
"""
Random fuzzer for LenientHTML.
Generates malformed markup and checks that parsing never raises and that the
resulting tokens and tree stay consistent with the input.
"""

import argparse
import random
import string
import sys
import time
import traceback

from lenienthtml import LenientHTML, NodeKind, walk

TAGS = [
    "div", "span", "p", "a", "img", "table", "tr", "td", "ul", "li", "form",
    "input", "button", "script", "style", "head", "body", "html", "title",
    "meta", "link", "br", "hr", "h1", "h2", "template", "pre", "code", "b", "i",
]

VOID_TAGS = ["area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"]

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "alt", "title", "name", "value",
    "type", "onclick", "data-x", "aria-label", "disabled", "checked", "hidden",
]

EXPRESSIONS = [
    "x", " user.name ", "a + b", "items[0]", "f(x, y=1)", "1 +", "", "{", "}",
    "'unterminated", "x if y else z", "lambda: 0", "\x00",
]

SPECIAL_CHARS = [
    "\x00", "\x0b", "\x0c", "\x7f", "\ufffd", "\u00a0", "\u2028", "\u200b", "\ufeff",
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    ws = [" ", "\t", "\n", "\r", "\f", ""]
    return "".join(random.choices(ws, k=random.randint(0, 4)))


def fuzz_tag_name():
    strategies = [
        lambda: random.choice(TAGS),
        lambda: random.choice(TAGS).upper(),
        lambda: random.choice(TAGS) + random_string(1, 3),
        lambda: random_string(1, 8),
        lambda: "",
        lambda: random.choice(TAGS) + random.choice(SPECIAL_CHARS),
        lambda: random.choice(TAGS) + "/" + random.choice(TAGS),
    ]
    return random.choice(strategies)()


def fuzz_expression():
    """Generate {{ }} spans, some unclosed or invalid."""
    body = random.choice(EXPRESSIONS)
    variants = [
        f"{{{{{body}}}}}",
        f"{{{{ {body} }}}}",
        f"{{{{{body}",
        f"{{{{{body}}}",
        f"{{{{{{{{{body}}}}}}}}}",
        f"}}}}{body}{{{{",
    ]
    return random.choice(variants)


def fuzz_attribute_value():
    strategies = [
        lambda: '"' + random_string() + '"',
        lambda: "'" + random_string() + "'",
        lambda: random_string(1, 10),
        lambda: '"' + random_string(),  # Unterminated
        lambda: '"' + random_string() + '""',  # Duplicate closing quote
        lambda: "'" + random_string() + "''",
        lambda: '"' + fuzz_expression() + '"',
        lambda: "'" + random_string(0, 5) + fuzz_expression() + random_string(0, 5) + "'",
        lambda: fuzz_expression(),
        lambda: '"' + random_string() + ">" + random_string() + '"',
        lambda: "",
    ]
    return random.choice(strategies)()


def fuzz_attribute():
    name = random.choice([random.choice(ATTRIBUTES), random_string(1, 10), "=", '"', "/"])
    if random.random() < 0.2:
        return name
    return f"{name}{random_whitespace()}={random_whitespace()}{fuzz_attribute_value()}"


def fuzz_open_tag():
    """Generate malformed opening tags."""
    tag = fuzz_tag_name()
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    if random.random() < 0.1:
        attrs += " <!-- " + random_string() + " -->"
    closing = random.choice([">", "/>", " >", "/ >", "", ">>", ">/"])
    opening = random.choice(["<", "< ", "<<", "<!", "<?", "</"]) if random.random() < 0.2 else "<"
    return f"{opening}{tag}{random_whitespace()}{attrs}{random_whitespace()}{closing}"


def fuzz_close_tag():
    tag = fuzz_tag_name()
    variants = [
        f"</{tag}>",
        f"</ {tag}>",
        f"</{tag}{random_whitespace()}>",
        f"</{tag}",
        f"</{tag}/>",
        f"<//{tag}>",
        f"</{tag} garbage>",
        f"</{tag} {fuzz_attribute()}>",
    ]
    return random.choice(variants)


def fuzz_comment():
    content = random_string(0, 30)
    variants = [
        f"<!--{content}-->",
        f"<!--{content}",
        f"<!--{content}--!>",
        "<!---->",
        "<!-->",
        f"<!--{content}--{content}-->",
        f"<!--{fuzz_expression()}-->",
        f"<!{content}>",
    ]
    return random.choice(variants)


def fuzz_declaration():
    variants = [
        "<!DOCTYPE html>",
        "<!doctype html>",
        "<!DOCTYPE",
        "<![CDATA[" + random_string() + "]]>",
        '<?xml version="1.0"?>',
        "<?php echo 1; ?>",
        "<?" + random_string(),
    ]
    return random.choice(variants)


def fuzz_raw_text():
    tag = random.choice(["script", "style", "SCRIPT"])
    content = random.choice([random_string(0, 30), "<p>x</p>", fuzz_expression(), f"</{tag}s>", "<!--"])
    variants = [
        f"<{tag}>{content}</{tag}>",
        f"<{tag}>{content}",
        f"<{tag}>{content}</{tag}",
        f"<{tag} type='text/plain'>{content}</{tag.lower()} >",
    ]
    return random.choice(variants)


def fuzz_text():
    strategies = [
        lambda: random_string(1, 40),
        lambda: fuzz_expression(),
        lambda: random_string(0, 10) + fuzz_expression() + random_string(0, 10),
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 5))),
        lambda: "<" + random.choice([" ", "1", "=", "<", ""]),
        lambda: random_string() + ">" + random_string(),
        lambda: "\r\n" * random.randint(1, 3),
    ]
    return random.choice(strategies)()


def fuzz_nested_structure(depth=0, max_depth=8):
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()
    tag = random.choice(TAGS + VOID_TAGS)
    children = "".join(fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3)))
    end = random.choice([f"</{tag}>", "", f"</{random.choice(TAGS)}>"])
    return f"<{tag}>{children}{end}"


def fuzz_deeply_nested():
    depth = random.randint(50, 500)
    return "<div>" * depth + fuzz_text() + "</div>" * random.randint(0, depth)


def generate_fuzzed_html():
    """Generate a complete fuzzed document."""
    parts = []
    for _ in range(random.randint(1, 20)):
        generator = random.choices(
            [
                fuzz_open_tag,
                fuzz_close_tag,
                fuzz_comment,
                fuzz_declaration,
                fuzz_raw_text,
                fuzz_text,
                fuzz_nested_structure,
                fuzz_deeply_nested,
            ],
            weights=[20, 10, 6, 3, 4, 15, 8, 1],
        )[0]
        parts.append(generator())
    return "".join(parts)


def check_invariants(html, doc):
    """Raise AssertionError if the parse result is inconsistent with html."""
    previous = 0
    for token in doc.tokens:
        assert token.offset >= previous, f"token out of order: {token!r}"
        assert html[token.offset : token.end] == token.lexeme, f"token does not match source: {token!r}"
        previous = token.end
    assert doc.tokens[-1].offset == len(html), "missing EOF token"

    for kind, node in walk(doc.root):
        if kind == NodeKind.TAG:
            assert 0 <= node.start <= node.end <= len(html), f"bad extent for {node!r}"
            for child in node.tag_nodes:
                assert child.parent is node, f"{child!r} not linked to {node!r}"
            if node.self_closing:
                assert node.content == "", f"self-closing {node!r} has content"
        elif kind == NodeKind.EMBEDDED_EXPRESSION:
            assert html[node.start : node.end] == "{{" + node.source + "}}", f"bad span for {node!r}"
            assert (node.error is None) == (node.expression is not None), f"{node!r} is neither valid nor invalid"
    for error in doc.errors:
        assert 0 <= error.offset <= len(html), f"error outside input: {error!r}"


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer."""
    if seed is not None:
        random.seed(seed)

    crashes = []
    hangs = []
    successes = 0

    print(f"Fuzzing lenienthtml with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            doc = LenientHTML(html, collect_errors=True)
            elapsed = time.perf_counter() - start
            check_invariants(html, doc)

            # Check for hangs (>5 seconds)
            if elapsed > 5.0:
                hangs.append({"test_num": i, "html": html, "time": elapsed})
                if verbose:
                    print(f"  HANG: Test {i} took {elapsed:.2f}s")
            else:
                successes += 1

        except Exception as e:
            crashes.append(
                {
                    "test_num": i,
                    "html": html,
                    "error": str(e) or type(e).__name__,
                    "traceback": traceback.format_exc(),
                },
            )
            if verbose:
                print(f"  CRASH: Test {i}: {e}")

    elapsed_total = time.time() - start_time

    print(f"\n{'=' * 60}")
    print("FUZZING RESULTS: lenienthtml")
    print(f"{'=' * 60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")

    if crashes:
        print(f"\n{'=' * 60}")
        print("CRASH DETAILS:")
        print(f"{'=' * 60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  HTML: {crash['html'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if hangs:
        print(f"\n{'=' * 60}")
        print("HANG DETAILS:")
        print(f"{'=' * 60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  HTML: {hang['html'][:200]!r}...")

    if save_failures and (crashes or hangs):
        filename = f"fuzz_failures_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"HTML:\n{crash['html']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz LenientHTML with malformed input")
    parser.add_argument("--num-tests", "-n", type=int, default=1000, help="Number of test cases (default: 1000)")
    parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--save-failures", action="store_true", help="Save failures to a file")
    parser.add_argument("--sample", type=int, metavar="N", help="Just print N sample documents (no parsing)")

    args = parser.parse_args()

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i + 1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(args.num_tests, seed=args.seed, verbose=args.verbose, save_failures=args.save_failures)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
