from django.contrib import admin

from .models import Bill, StoredTare, Ticket


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ("ticket_no", "vehicle_no", "party_name", "first_weight_type", "gross_weight", "tare_weight", "created_at")
    search_fields = ("ticket_no", "vehicle_no", "party_name")


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ("bill_no", "vehicle_no", "party_name", "status", "gross_weight", "tare_weight", "net_weight", "created_at")
    list_filter = ("status", "first_weight_type")
    search_fields = ("bill_no", "vehicle_no", "party_name")
    readonly_fields = ("net_weight", "created_at", "updated_at", "closed_at", "printed_at")


@admin.register(StoredTare)
class StoredTareAdmin(admin.ModelAdmin):
    list_display = ("vehicle_no", "tare_weight", "stored_at", "updated_at")
    search_fields = ("vehicle_no",)
