"""
Mapping entre les entités du domaine et les documents persistés.

Les classes du domaine ne connaissent pas la persistance : c'est
ici qu'on fait le pont entre leurs attributs et les champs des
documents (noms camelCase conservés pour relire les données
existantes sans migration).

Le prix est écrit en texte pour ne rien perdre de la précision
du Decimal ; à la lecture, un nombre flottant est aussi accepté.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from inventory.domain import model

Document = dict[str, Any]


# --- Lignes de commande ---


def items_to_documents(items: Iterable[model.OrderItem]) -> list[Document]:
    return [{"sku": item.sku, "quantity": item.quantity} for item in items]


def items_from_documents(documents: Iterable[Document] | None) -> tuple[model.OrderItem, ...]:
    return tuple(
        model.OrderItem(sku=doc.get("sku") or "", quantity=int(doc.get("quantity") or 0))
        for doc in documents or []
    )


# --- Produits ---


def product_to_document(product: model.Product) -> Document:
    return {
        "sku": product.sku,
        "name": product.name,
        "description": product.description,
        "quantity": product.quantity,
        "price": str(product.price),
        "supplierId": product.supplier_id,
        "dateReceived": product.date_received,
    }


def product_stock_fields(product: model.Product) -> Document:
    """Seuls champs réécrits par une mise à jour de produit."""
    return {"quantity": product.quantity, "price": str(product.price)}


def product_from_document(doc: Document) -> model.Product:
    return model.Product(
        sku=doc.get("sku") or "",
        name=doc.get("name") or "",
        description=doc.get("description") or "",
        quantity=int(doc.get("quantity") or 0),
        # str() accepte indifféremment un texte ou un float historique
        price=Decimal(str(doc.get("price") or "0")),
        supplier_id=doc.get("supplierId") or "",
        date_received=doc.get("dateReceived") or "",
    )


# --- Fournisseurs ---


def supplier_to_document(supplier: model.Supplier) -> Document:
    return {"id": supplier.id, "name": supplier.name, "contact": supplier.contact}


def supplier_from_document(doc: Document) -> model.Supplier:
    return model.Supplier(
        id=doc.get("id") or "",
        name=doc.get("name") or "",
        contact=doc.get("contact") or "",
    )


# --- Commandes d'achat ---


def order_to_document(order: model.Order) -> Document:
    return {
        "orderId": order.order_id,
        "supplierId": order.supplier_id,
        "orderDate": order.order_date.isoformat(),
        "items": items_to_documents(order.items),
    }


def order_from_document(doc: Document) -> model.Order:
    return model.Order(
        order_id=doc.get("orderId") or "",
        supplier_id=doc.get("supplierId") or "",
        items=items_from_documents(doc.get("items")),
        order_date=date.fromisoformat(doc["orderDate"]),
    )


# --- Commandes de vente ---


def sell_order_to_document(sell_order: model.SellOrder) -> Document:
    return {
        "sellOrderId": sell_order.order_id,
        "customerName": sell_order.customer_name,
        "sellDate": sell_order.order_date.isoformat(),
        "items": items_to_documents(sell_order.items),
    }


def sell_order_from_document(doc: Document) -> model.SellOrder:
    return model.SellOrder(
        order_id=doc.get("sellOrderId") or "",
        customer_name=doc.get("customerName") or "",
        items=items_from_documents(doc.get("items")),
        order_date=date.fromisoformat(doc["sellDate"]),
    )
