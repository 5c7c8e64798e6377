"""
MusicShop 命令行工具

使用方式：
musicshop product add --name "Bajo 4 cuerdas" --brand Redmond --color Black --cost-usd 120 --weight 4 --stock 3 --price 14500
musicshop order create --customer "Ana" --item RMB1001:1 --pending
musicshop order advance <order_id>
musicshop calc landed --cost-usd 100 --weight 2
"""
import argparse
import json
import sys
from typing import List, Optional

from ms_core.config import get_settings
from ms_core.models import BoardColumn, OrderStatus
from ms_core.services import OrderDraft, ShopState
from ms_core.utils.errors import BadRequestError, MusicShopException, NotFoundError, ValidationError
from ms_core.utils.logger import setup_logging


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


def _parse_item(raw: str):
    """解析订单行 SKU:数量[:单价]"""
    parts = raw.split(":")
    if len(parts) not in (2, 3):
        raise BadRequestError(code="INVALID_ITEM", detail=f"Item must be SKU:QTY[:PRICE], got: {raw}")
    try:
        quantity = int(parts[1])
        price = float(parts[2]) if len(parts) == 3 else None
    except ValueError:
        raise BadRequestError(code="INVALID_ITEM", detail=f"Invalid quantity or price in item: {raw}")
    if quantity < 1:
        raise BadRequestError(code="INVALID_ITEM", detail=f"Quantity must be at least 1 in item: {raw}")
    return parts[0], quantity, price


def _require_order(state: ShopState, order_id: str):
    order = state.get_order(order_id)
    if order is None:
        raise NotFoundError(code="ORDER_NOT_FOUND", resource=f"Order {order_id}")
    return order


# ---- product ----

def cmd_product_add(state: ShopState, args) -> None:
    product = state.register_product(
        sku=args.sku,
        name=args.name,
        brand=args.brand or "",
        color=args.color,
        cost_usd=args.cost_usd,
        weight=args.weight,
        stock=args.stock,
        price=args.price,
        **{k: v for k, v in (("min_stock", args.min_stock), ("max_stock", args.max_stock)) if v is not None},
    )
    _print_json(product.model_dump(by_alias=True))


def cmd_product_list(state: ShopState, args) -> None:
    rows = []
    for p in state.list_products(args.search):
        row = p.model_dump(by_alias=True)
        row["landedCost"] = round(state.product_landed_cost(p), 2)
        rows.append(row)
    _print_json(rows)


def cmd_product_delete(state: ShopState, args) -> None:
    if not state.delete_product(args.sku):
        raise NotFoundError(code="PRODUCT_NOT_FOUND", resource=f"Product {args.sku}")
    _print_json({"ok": True, "deleted": args.sku})


def cmd_product_export(state: ShopState, args) -> None:
    content = state.export_inventory_csv()
    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        print(f"✓ Exported {len(state.list_products())} products to {args.output}")
    else:
        sys.stdout.write(content)


def cmd_product_import(state: ShopState, args) -> None:
    try:
        with open(args.path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except OSError as e:
        raise BadRequestError(code="IMPORT_FILE_UNREADABLE", detail=f"Cannot read {args.path}: {e.strerror or e}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequestError(code="IMPORT_FILE_INVALID", detail=f"Invalid JSON in {args.path}: {e}")
    result = state.import_products(raw if isinstance(raw, list) else [raw])
    if not result.success:
        raise ValidationError(code=result.error_code, detail=result.error)
    _print_json(result.data)


# ---- order ----

def cmd_order_create(state: ShopState, args) -> None:
    draft = OrderDraft(args.customer)
    for raw in args.item:
        sku, quantity, price = _parse_item(raw)
        product = state.get_product(sku)
        if product is None:
            raise NotFoundError(code="PRODUCT_NOT_FOUND", resource=f"Product {sku}")
        draft.add_product(product)
        draft.set_quantity(sku, quantity)
        if price is not None:
            draft.set_price(sku, price)

    status = OrderStatus.PENDING if args.pending else OrderStatus.QUOTE
    order = state.create_order(draft.submit(status))
    _print_json(order.model_dump(mode="json", by_alias=True))


def cmd_order_list(state: ShopState, args) -> None:
    column = BoardColumn(args.column) if args.column else None
    orders = state.list_orders(search=args.search, column=column)
    _print_json([o.model_dump(mode="json", by_alias=True) for o in orders])


def cmd_order_advance(state: ShopState, args) -> None:
    _require_order(state, args.order_id)
    _print_json(state.advance_order(args.order_id).model_dump(mode="json", by_alias=True))


def cmd_order_move(state: ShopState, args) -> None:
    _require_order(state, args.order_id)
    if args.target in {c.value for c in BoardColumn}:
        order = state.move_order_to_column(args.order_id, BoardColumn(args.target))
    else:
        order = state.transition_order(args.order_id, OrderStatus(args.target))
    _print_json(order.model_dump(mode="json", by_alias=True))


def cmd_order_cancel(state: ShopState, args) -> None:
    _require_order(state, args.order_id)
    order = state.transition_order(args.order_id, OrderStatus.CANCELLED)
    _print_json(order.model_dump(mode="json", by_alias=True))


def cmd_order_delete(state: ShopState, args) -> None:
    if not state.delete_order(args.order_id):
        raise NotFoundError(code="ORDER_NOT_FOUND", resource=f"Order {args.order_id}")
    _print_json({"ok": True, "deleted": args.order_id})


# ---- calc / config / dashboard ----

def cmd_calc_landed(state: ShopState, args) -> None:
    _print_json({
        "unitCost": args.cost_usd,
        "weight": args.weight,
        "landedCost": round(state.landed_cost(args.cost_usd, args.weight), 2),
        "config": state.config.model_dump(by_alias=True),
    })


def cmd_config_show(state: ShopState, args) -> None:
    _print_json(state.config.model_dump(by_alias=True))


def cmd_config_set(state: ShopState, args) -> None:
    config = state.update_config(
        exchange_rate=args.exchange_rate,
        courier_rate=args.courier_rate,
        packaging=args.packaging,
    )
    _print_json(config.model_dump(by_alias=True))


def cmd_dashboard(state: ShopState, args) -> None:
    _print_json(state.inventory_summary().to_dict())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="musicshop", description="MusicShop 库存与销售流水线工具")
    groups = parser.add_subparsers(dest="group", required=True)

    # product
    product = groups.add_parser("product", help="商品管理").add_subparsers(dest="action", required=True)

    p = product.add_parser("add", help="新增或更新商品")
    p.add_argument("--sku", help="SKU，省略时自动生成")
    p.add_argument("--name", required=True)
    p.add_argument("--brand")
    p.add_argument("--color")
    p.add_argument("--cost-usd", type=float, default=0.0)
    p.add_argument("--weight", type=float, default=0.0)
    p.add_argument("--stock", type=int, default=0)
    p.add_argument("--min-stock", type=int)
    p.add_argument("--max-stock", type=int)
    p.add_argument("--price", type=float, default=0.0)
    p.set_defaults(handler=cmd_product_add)

    p = product.add_parser("list", help="列出商品")
    p.add_argument("--search")
    p.set_defaults(handler=cmd_product_list)

    p = product.add_parser("delete", help="删除商品")
    p.add_argument("sku")
    p.set_defaults(handler=cmd_product_delete)

    p = product.add_parser("export-csv", help="导出库存 CSV")
    p.add_argument("--output", "-o")
    p.set_defaults(handler=cmd_product_export)

    p = product.add_parser("import", help="从 JSON 文件导入商品")
    p.add_argument("path")
    p.set_defaults(handler=cmd_product_import)

    # order
    order = groups.add_parser("order", help="订单管理").add_subparsers(dest="action", required=True)

    p = order.add_parser("create", help="创建报价或订单")
    p.add_argument("--customer", required=True)
    p.add_argument("--item", action="append", default=[], help="SKU:数量[:单价]，可重复")
    p.add_argument("--pending", action="store_true", help="直接确认订单（扣减库存）")
    p.set_defaults(handler=cmd_order_create)

    p = order.add_parser("list", help="列出订单")
    p.add_argument("--search")
    p.add_argument("--column", choices=[c.value for c in BoardColumn])
    p.set_defaults(handler=cmd_order_list)

    p = order.add_parser("advance", help="流水线前进一步")
    p.add_argument("order_id")
    p.set_defaults(handler=cmd_order_advance)

    p = order.add_parser("move", help="移动到看板列或指定状态")
    p.add_argument("order_id")
    p.add_argument("target", choices=[c.value for c in BoardColumn] + [s.value for s in OrderStatus])
    p.set_defaults(handler=cmd_order_move)

    p = order.add_parser("cancel", help="取消订单")
    p.add_argument("order_id")
    p.set_defaults(handler=cmd_order_cancel)

    p = order.add_parser("delete", help="删除订单记录（不影响库存）")
    p.add_argument("order_id")
    p.set_defaults(handler=cmd_order_delete)

    # calc
    calc = groups.add_parser("calc", help="成本计算").add_subparsers(dest="action", required=True)
    p = calc.add_parser("landed", help="到岸成本")
    p.add_argument("--cost-usd", type=float, required=True)
    p.add_argument("--weight", type=float, default=0.0)
    p.set_defaults(handler=cmd_calc_landed)

    # config
    config = groups.add_parser("config", help="到岸成本参数").add_subparsers(dest="action", required=True)
    config.add_parser("show").set_defaults(handler=cmd_config_show)
    p = config.add_parser("set")
    p.add_argument("--exchange-rate", type=float)
    p.add_argument("--courier-rate", type=float)
    p.add_argument("--packaging", type=float)
    p.set_defaults(handler=cmd_config_set)

    groups.add_parser("dashboard", help="库存汇总").set_defaults(handler=cmd_dashboard)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    # 日志输出到 stderr，stdout 只输出结果
    setup_logging(settings.log_level, settings.log_format, settings.log_pii_masking, stream=sys.stderr)

    state = None
    try:
        state = ShopState.from_settings(settings)
        args.handler(state, args)
    except MusicShopException as e:
        print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 1
    finally:
        if state is not None:
            state.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
