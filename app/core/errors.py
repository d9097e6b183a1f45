# app/core/errors.py
# Иерархия доменных ошибок. Каждая ошибка знает свой HTTP-статус и
# безопасное для клиента сообщение; обработчик в app.main отдаёт {"error": message}.


class ShopError(Exception):
    """Базовая ошибка сервиса."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class OrderValidationError(ShopError):
    """Запрос на заказ некорректен (например, пустой список позиций)."""

    status_code = 400
    message = "Order items are required"


class OrderPersistenceError(ShopError):
    """Транзакция оформления заказа откатилась. Причина пишется только в лог."""

    status_code = 500
    message = "Failed to create order"


class OrderNotFoundError(ShopError):
    """Заказ не существует или принадлежит другому пользователю."""

    status_code = 404
    message = "Order not found"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__()


class InvalidOrderStatusError(ShopError):
    status_code = 400
    message = "Invalid status"

    def __init__(self, status: str):
        self.status = status
        super().__init__()


class FetchError(ShopError):
    """Чтение из БД не удалось. Текст драйвера и SQL остаются в логах."""

    status_code = 500
    message = "Failed to fetch data"


class OrderFetchError(FetchError):
    message = "Failed to fetch orders"


class ProductFetchError(FetchError):
    message = "Error fetching products"


class ProductNotFoundError(ShopError):
    status_code = 404
    message = "Product not found"

    def __init__(self, product_ref):
        self.product_ref = product_ref
        super().__init__()


class ProductValidationError(ShopError):
    """Товар нельзя сохранить в таком виде: нет категории, занят slug и т.п."""

    status_code = 400
    message = "Invalid product"


class ProductPersistenceError(ShopError):
    status_code = 500
    message = "Failed to save product"
