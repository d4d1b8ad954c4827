from __future__ import annotations
import argparse, logging, sys
from quiz_core.config import ANSWER_VALUES
from quiz_core.quiz_bank import load_quiz_file, load_sample_quiz
from quiz_core.results import lookup_result_type
from quiz_core.scoring import compute_axis_scores, compute_result_code, filter_recommendations, score_percent
from quiz_core.validators import has_errors, validate_quiz

SCALE = "[-2=strongly A, -1=A, 0=neutral, 1=B, 2=strongly B]"

def ask(q) -> int:
    print(f"\n{q.text}\n  A) {q.option_a}\n  B) {q.option_b}")
    while True:
        v = input(f"Your answer {SCALE}: ").strip()
        try:
            n = int(v)
        except ValueError:
            n = None
        if n in ANSWER_VALUES: return n
        print("Enter a whole number from -2 to 2.")

def bar(normalized: float, width: int = 20) -> str:
    pos = int(round((normalized + 1) / 2 * width))
    return "[" + "#" * pos + "-" * (width - pos) + "]"

def main(argv=None):
    ap = argparse.ArgumentParser(description="Take a type quiz in the terminal.")
    ap.add_argument("quiz", nargs="?", help="quiz JSON file (defaults to the bundled sample)")
    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")

    quiz = load_quiz_file(args.quiz) if args.quiz else load_sample_quiz()
    issues = validate_quiz(quiz)
    for i in issues: logging.warning("%s: %s", i.code, i.message)
    if has_errors(issues):
        print("Quiz definition has errors; fix them before running."); return 1

    print(quiz.title)
    if quiz.description: print(quiz.description)
    answers = {q.id: ask(q) for q in quiz.questions}

    scores = compute_axis_scores(quiz.questions, answers, quiz.axes)
    code = compute_result_code(scores, quiz.axes)
    print("\n--- Axes ---")
    for a in quiz.axes:
        s = scores[a.key]
        print(f"{a.left_label:>12} {bar(s.normalized)} {a.right_label:<12} {score_percent(s.normalized):+d}%")
    rt = lookup_result_type(quiz.results, code)
    print(f"\nResult {code}: " + (f"{rt.name} - {rt.tagline}\n{rt.description}" if rt else "(no result type defined)"))
    recs = filter_recommendations(quiz.recommendations, scores)
    if recs:
        print("\n--- Recommended ---")
        for r in recs: print(f"* {r.title}" + (f" <{r.url}>" if r.url else ""))
    return 0

if __name__ == "__main__": sys.exit(main())
