"""
Modèle de domaine de l'inventaire du magasin.

Les entités sont de simples enregistrements, sans comportement :
toute la logique (cohérence du stock, miroir vers la persistance)
vit dans l'InventoryStore de la service layer.

- Product est mutable : sa quantité et son prix évoluent.
- Supplier, Order, SellOrder et OrderItem sont immuables
  (frozen=True) ; les lignes d'une commande sont stockées
  dans un tuple pour que la commande entière le soit aussi.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass
class Product:
    """
    Entité représentant une ligne de produit, identifiée par son SKU.

    `supplier_id` référence un Supplier mais n'est pas une clé
    étrangère : rien ne vérifie que le fournisseur existe.
    """

    sku: str
    name: str
    description: str
    quantity: int
    price: Decimal
    supplier_id: str = ""
    date_received: str = ""


@dataclass(frozen=True)
class Supplier:
    id: str
    name: str
    contact: str = ""


@dataclass(frozen=True)
class OrderItem:
    """
    Value Object : une ligne de commande (SKU + quantité).

    N'existe qu'à l'intérieur d'un Order ou d'un SellOrder,
    jamais stockée seule.
    """

    sku: str
    quantity: int


@dataclass(frozen=True)
class Order:
    """
    Commande d'achat auprès d'un fournisseur.

    Représente une intention de recevoir du stock : elle
    n'a aucun effet sur les quantités des produits.
    """

    order_id: str
    supplier_id: str
    items: tuple[OrderItem, ...] = field(default_factory=tuple)
    order_date: date = field(default_factory=date.today)

    def __post_init__(self) -> None:
        # Accepte une liste à la construction, stocke toujours un tuple
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class SellOrder:
    """
    Commande de vente à un client.

    Son enregistrement décrémente immédiatement le stock des
    produits référencés (voir InventoryStore.add_sell_order).
    """

    order_id: str
    customer_name: str
    items: tuple[OrderItem, ...] = field(default_factory=tuple)
    order_date: date = field(default_factory=date.today)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
