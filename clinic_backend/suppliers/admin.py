# suppliers/admin.py

from django.contrib import admin

from suppliers.models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "tax_id", "phone", "email", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "tax_id", "email")

    def has_delete_permission(self, request, obj=None):
        # deactivate instead; movements PROTECT their supplier
        return False
