from django.db import models


class StockMovement(models.Model):
    """A signed change in a product's stock; the stock level is their sum"""
    MOVEMENT_IN = 'IN'
    MOVEMENT_OUT = 'OUT'
    MOVEMENT_TYPE_CHOICES = [
        (MOVEMENT_IN, 'Stock In'),
        (MOVEMENT_OUT, 'Stock Out'),
    ]

    product = models.ForeignKey('catalog.Product', on_delete=models.CASCADE, related_name='stock_movements')
    # Positive for additions, negative for removals
    quantity = models.IntegerField()
    movement_type = models.CharField(max_length=10, choices=MOVEMENT_TYPE_CHOICES)
    reason = models.CharField(max_length=255, blank=True, null=True)
    reference = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.product} {self.movement_type} {self.quantity}"

    class Meta:
        db_table = 'stock_movements'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='stock_movem_product_3f1a7e_idx'),
        ]
