from __future__ import annotations
import argparse, sys
from quiz_core.quiz_bank import load_quiz_file, load_sample_quiz
from quiz_core.results import all_result_codes
from quiz_core.validators import has_errors, validate_quiz

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Check quiz definitions before publishing.")
    ap.add_argument("files", nargs="*", help="quiz JSON files; the bundled sample when omitted")
    args = ap.parse_args(argv)

    targets = [(f, load_quiz_file(f)) for f in args.files] or [("<sample>", load_sample_quiz())]
    failed = False
    for name, quiz in targets:
        issues = validate_quiz(quiz)
        print(f"{name}: {len(quiz.axes)} axes, {len(quiz.questions)} questions, "
              f"{len(quiz.results)}/{len(all_result_codes(quiz.axes))} result codes, "
              f"{len(quiz.recommendations)} recommendations")
        for i in issues:
            print(f"  {i.level.upper():7} {i.code}: {i.message}")
        if not issues:
            print("  ✓ Ready to publish")
        failed = failed or has_errors(issues)
    return 1 if failed else 0

if __name__ == "__main__":
    sys.exit(main())
