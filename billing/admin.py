from django.contrib import admin

from .models import Invoice, Payment


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ("timestamp",)


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("id", "total_amount", "final_amount", "buyer_type", "buyer_tin", "created_at")
    list_filter = ("buyer_type",)
    search_fields = ("buyer_tin",)
    inlines = [PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("invoice", "amount", "method", "timestamp")
    list_filter = ("method",)
