RESERVATION_CONFIRMED = "reservation_confirmed"
RESERVATION_STATUS_UPDATED = "reservation_status_updated"
INVOICE_GENERATED = "invoice_generated"

TEMPLATES = {
    RESERVATION_CONFIRMED: """
<h2>{hotel_name}</h2>
<p>Dear {guest_name},</p>
<p>Your reservation is confirmed.</p>
<table>
  <tr><td>Confirmation number</td><td><b>{confirmation_number}</b></td></tr>
  <tr><td>Room</td><td>{room_number} ({room_type})</td></tr>
  <tr><td>Check-in</td><td>{check_in}</td></tr>
  <tr><td>Check-out</td><td>{check_out}</td></tr>
  <tr><td>Guests</td><td>{number_of_guests}</td></tr>
  <tr><td>Total</td><td>{total_amount}</td></tr>
</table>
<p>We look forward to welcoming you.</p>
""",
    RESERVATION_STATUS_UPDATED: """
<h2>{hotel_name}</h2>
<p>Dear {guest_name},</p>
<p>The status of reservation <b>{confirmation_number}</b> is now <b>{status}</b>.</p>
""",
    INVOICE_GENERATED: """
<h2>{hotel_name}</h2>
<p>Dear {guest_name},</p>
<p>Invoice <b>{invoice_number}</b> for reservation {confirmation_number}.</p>
<table>
  <tr><td>Room charges</td><td>{room_charges}</td></tr>
  <tr><td>Services</td><td>{services_total}</td></tr>
  <tr><td>Taxes</td><td>{taxes}</td></tr>
  <tr><td>Discount</td><td>{discount}</td></tr>
  <tr><td><b>Total</b></td><td><b>{total_amount}</b></td></tr>
</table>
<p>Payment status: {payment_status}</p>
""",
}
