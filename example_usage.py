"""규칙 엔진 사용 예제"""

from formlogic.core import Direction, create_rule_engine, evaluate, collect_dependencies


ORDER_RULES = {
    "subtotal": {"*": [{"var": "price"}, {"var": "qty"}]},
    "shipping_fee": {"if": [{">": [{"var": "subtotal"}, 50]}, 0, 5]},
    "total": {"+": [{"var": "subtotal"}, {"var": "shipping_fee"}]},
    "form": {
        "coupon_visible": {"and": [{"var": "member"}, {"!": {"var": "coupon_used"}}]},
    },
}


def example_evaluate():
    """단일 표현식 평가"""
    print("=" * 60)
    print("예제 1: 단일 표현식 평가")
    print("=" * 60)

    logic = {"some": [{"var": "items"}, {">": [{"var": "$"}, 5]}]}
    print(f"표현식: {logic}")
    print(f"의존성: {collect_dependencies(logic)}")
    print(f"items=[1, 2, 9] -> {evaluate(logic, {'items': [1, 2, 9]})}")
    print(f"items=[1, 2, 3] -> {evaluate(logic, {'items': [1, 2, 3]})}")
    print()


def example_run():
    """규칙 묶음 실행"""
    print("=" * 60)
    print("예제 2: 규칙 묶음 실행")
    print("=" * 60)

    engine = create_rule_engine(ORDER_RULES)
    engine.use_facts({"price": 12, "qty": 5, "member": True})

    for path in engine.list_rule_paths():
        print(f"  {path:<20} -> {engine.run(path)}")
    print()


def example_drill():
    """값 변경 시 영향받는 규칙 재평가"""
    print("=" * 60)
    print("예제 3: 의존 규칙 재평가 (drill)")
    print("=" * 60)

    engine = create_rule_engine(ORDER_RULES)
    facts = {"price": 12, "qty": 5, "subtotal": 60, "shipping_fee": 0}

    paths = engine.drill_paths("price", Direction.BACKWARD)
    results = engine.drill("price", facts, Direction.BACKWARD)

    print("price가 바뀌면 다시 계산할 규칙:")
    for path, result in zip(paths, results):
        print(f"  {path:<20} -> {result}")
    print()


if __name__ == "__main__":
    example_evaluate()
    example_run()
    example_drill()
